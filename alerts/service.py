"""
Notifier services for delivering watchdog messages to the operator.
"""
import asyncio
import logging
from typing import Optional, Protocol

from telegram import Bot
from telegram.error import TelegramError
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from config.credentials import WatchdogSettings

logger = logging.getLogger(__name__)

WHATSAPP_PREFIX = "whatsapp:"


class Notifier(Protocol):
    async def send(self, to: str, text: str) -> bool:
        ...


class WhatsAppNotifier:
    """
    Sends WhatsApp messages through the Twilio REST API.
    Failures are logged and reported as False, never raised.
    """

    def __init__(self, account_sid: str, auth_token: str,
                 sender: str = "whatsapp:+14155238886", client: Optional[Client] = None):
        self.sender = self.to_whatsapp_address(sender)
        self.client = client
        if self.client is None:
            try:
                self.client = Client(account_sid, auth_token)
            except Exception as e:
                logger.warning("Could not initialize Twilio client: %s", e)

    @staticmethod
    def to_whatsapp_address(address: str) -> str:
        address = (address or "").strip()
        if address.startswith(WHATSAPP_PREFIX):
            return address
        return f"{WHATSAPP_PREFIX}{address}"

    def _create_message(self, to: str, text: str):
        return self.client.messages.create(
            to=self.to_whatsapp_address(to),
            from_=self.sender,
            body=text,
        )

    async def send(self, to: str, text: str) -> bool:
        if self.client is None:
            logger.warning("Twilio not configured. Skipping message to %s", to)
            return False

        try:
            message = await asyncio.to_thread(self._create_message, to, text)
        except TwilioRestException as e:
            logger.error("Failed to send message to %s: %s", to, e)
            return False
        except Exception as e:
            logger.error("Error sending message to %s: %s", to, e)
            return False

        logger.info("Message sent: SID %s", message.sid)
        return True


class TelegramNotifier:
    """
    Sends plain text messages to a Telegram chat.
    """

    def __init__(self, bot_token: str, bot: Optional[Bot] = None):
        self.bot = bot
        if self.bot is None and bot_token:
            try:
                self.bot = Bot(token=bot_token)
            except Exception as e:
                logger.warning("Could not initialize Telegram bot: %s", e)

    async def send(self, to: str, text: str) -> bool:
        if not self.bot or not to:
            logger.warning("Telegram not configured. Skipping message to %s", to)
            return False

        try:
            message = await self.bot.send_message(chat_id=to, text=text)
        except TelegramError as e:
            logger.error("Telegram error sending to %s: %s", to, e)
            return False
        except Exception as e:
            logger.error("Error sending Telegram message to %s: %s", to, e)
            return False

        logger.info("Message sent: id %s", getattr(message, "message_id", "?"))
        return True


def build_notifier(settings: WatchdogSettings) -> Notifier:
    """Pick the notifier for the configured messaging channel."""
    if settings.channel == "telegram":
        return TelegramNotifier(settings.auth_token)
    return WhatsAppNotifier(settings.account_sid, settings.auth_token, settings.sender)
