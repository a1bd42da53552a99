"""
Inbound webhook server.

Serves the messaging provider's webhook and owns the background poll loop for
the lifetime of the process.
"""
import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Form, Response

from alerts.service import Notifier, build_notifier
from app.interactive_bot import InteractiveBot
from app.status_handler import StatusQueryHandler
from config.credentials import WatchdogSettings
from monitoring.alert_debouncer import AlertDebouncer
from monitoring.service_prober import ServiceProber
from monitoring.service_watchdog import ServiceWatchdog

logger = logging.getLogger(__name__)

EMPTY_TWIML = '<?xml version="1.0" encoding="UTF-8"?><Response></Response>'


def create_app(
    settings: WatchdogSettings,
    notifier: Optional[Notifier] = None,
    prober: Optional[ServiceProber] = None,
    watchdog: Optional[ServiceWatchdog] = None,
    run_watchdog: bool = True,
) -> FastAPI:
    notifier = notifier or build_notifier(settings)
    prober = prober or ServiceProber(timeout=settings.probe_timeout_seconds)
    watchdog = watchdog or ServiceWatchdog(
        services=settings.services,
        recipient=settings.recipient,
        prober=prober,
        notifier=notifier,
        debouncer=AlertDebouncer(cooldown=timedelta(seconds=settings.cooldown_seconds)),
        interval_seconds=settings.check_interval_seconds,
    )
    status_handler = StatusQueryHandler(
        services=settings.services,
        prober=prober,
        notifier=notifier,
        keyword=settings.status_keyword,
    )
    bot = InteractiveBot(settings.auth_token, status_handler) if settings.channel == "telegram" else None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = None
        if run_watchdog:
            task = asyncio.create_task(watchdog.run_forever(), name="service-watchdog")
        if bot is not None:
            await bot.start_polling()
        try:
            yield
        finally:
            if bot is not None:
                await bot.stop()
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            logger.info("Service watchdog stopped")

    app = FastAPI(title="Service Watchdog", lifespan=lifespan)
    app.state.settings = settings
    app.state.watchdog = watchdog
    app.state.status_handler = status_handler

    @app.post("/webhook")
    async def webhook(sender: str = Form("", alias="From"), body: str = Form("", alias="Body")):
        """Inbound message from the messaging provider. Missing fields are ignored."""
        await status_handler.handle(sender, body)
        return Response(content=EMPTY_TWIML, media_type="application/xml")

    @app.get("/health")
    async def health():
        return {"status": "ok", "services": list(settings.services)}

    return app
