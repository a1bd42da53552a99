import os
from dotenv import load_dotenv

load_dotenv()

# WATCHED SERVICES (fixed for the process lifetime)
WATCHED_SERVICES = tuple(
    name.strip()
    for name in os.getenv("WATCHED_SERVICES", "XblGameSave,OutroServico").split(",")
    if name.strip()
)

# POLLING & DEBOUNCE
CHECK_INTERVAL_SECONDS = int(os.getenv("CHECK_INTERVAL_SECONDS", "300"))  # 5 minutes
ALERT_COOLDOWN_SECONDS = int(os.getenv("ALERT_COOLDOWN_SECONDS", "600"))  # 10 minutes, must exceed the interval
PROBE_TIMEOUT_SECONDS = int(os.getenv("PROBE_TIMEOUT_SECONDS", "10"))

# INBOUND WEBHOOK
WEBHOOK_HOST = os.getenv("WEBHOOK_HOST", "0.0.0.0")
WEBHOOK_PORT = int(os.getenv("WEBHOOK_PORT", "8080"))
STATUS_KEYWORD = os.getenv("STATUS_KEYWORD", "status").lower()

# MESSAGING
MESSAGING_CHANNEL = os.getenv("MESSAGING_CHANNEL", "whatsapp").lower()  # whatsapp | telegram
ALERT_RECIPIENT = os.getenv("ALERT_RECIPIENT")

# TWILIO (WhatsApp sandbox sender by default)
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_WHATSAPP_FROM = os.getenv("TWILIO_WHATSAPP_FROM", "whatsapp:+14155238886")

# TELEGRAM
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID")

# LOGGING
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
