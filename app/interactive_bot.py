"""
Interactive Telegram Bot for on-demand service status

Handles commands: /start, /status, /help, and the plain-text "status" keyword.
"""
import logging
from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from app.status_handler import StatusQueryHandler

logger = logging.getLogger(__name__)


class InteractiveBot:
    def __init__(self, token: str, status_handler: StatusQueryHandler):
        self.token = token
        self.status_handler = status_handler
        self.application = None

    def _set_up_handlers(self, application):
        application.add_handler(CommandHandler("start", self.welcome))
        application.add_handler(CommandHandler("status", self.status))
        application.add_handler(CommandHandler("help", self.help))
        application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self.text_message))

    async def welcome(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Send a message when the command /start is issued."""
        await update.message.reply_text(
            "👋 Service watchdog is online.\n\n"
            "Send /status (or just \"status\") to get the state of every watched service."
        )

    async def status(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Reply with the live status of each watched service."""
        chat_id = str(update.effective_chat.id)
        await self.status_handler.handle(chat_id, self.status_handler.keyword)

    async def text_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Plain text: only the status keyword gets a reply."""
        chat_id = str(update.effective_chat.id)
        await self.status_handler.handle(chat_id, update.message.text)

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Show help message."""
        await update.message.reply_text(
            "📚 COMMANDS:\n\n"
            "/status - Current state of every watched service\n"
            "/help - Show this message"
        )

    async def start_polling(self):
        """Start receiving updates inside an already running event loop."""
        logger.info("Starting Telegram status bot...")
        self.application = Application.builder().token(self.token).build()
        self._set_up_handlers(self.application)
        await self.application.initialize()
        await self.application.start()
        await self.application.updater.start_polling()

    async def stop(self):
        if self.application is None:
            return
        await self.application.updater.stop()
        await self.application.stop()
        await self.application.shutdown()
        self.application = None
