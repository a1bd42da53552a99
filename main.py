#!/usr/bin/env python3
"""
Main entry point for the Service Watchdog.
Watches OS services, alerts the operator when one stops and answers
on-demand "status" queries over the messaging channel.

Usage:
    python main.py                # Webhook server + background poll loop
    python main.py --once         # One poll cycle, then exit
    python main.py --no-prompt    # Fail instead of asking for missing credentials
"""
import argparse
import asyncio
import logging
import sys
from datetime import timedelta

import uvicorn

from alerts.service import build_notifier
from app.webhook_server import create_app
from config.config import LOG_LEVEL
from config.credentials import ConfigurationError, WatchdogSettings, load_settings
from monitoring.alert_debouncer import AlertDebouncer
from monitoring.service_prober import ServiceProber
from monitoring.service_watchdog import ServiceWatchdog

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Service health watchdog")
    parser.add_argument("--once", action="store_true", help="run a single poll cycle and exit")
    parser.add_argument("--no-prompt", action="store_true", help="never prompt on the terminal for credentials")
    parser.add_argument("--port", type=int, default=None, help="webhook listening port")
    return parser.parse_args(argv)


async def run_once(settings: WatchdogSettings) -> list:
    """Single poll cycle (e.g. from a systemd timer)."""
    watchdog = ServiceWatchdog(
        services=settings.services,
        recipient=settings.recipient,
        prober=ServiceProber(timeout=settings.probe_timeout_seconds),
        notifier=build_notifier(settings),
        debouncer=AlertDebouncer(cooldown=timedelta(seconds=settings.cooldown_seconds)),
        interval_seconds=settings.check_interval_seconds,
    )
    alerted = await watchdog.run_cycle()
    logger.info("Cycle complete: %d alert(s) sent", len(alerted))
    return alerted


def main(argv=None) -> int:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, LOG_LEVEL, logging.INFO),
    )
    args = parse_args(argv)

    try:
        settings = load_settings(
            interactive=not args.no_prompt and sys.stdin.isatty(),
            port=args.port,
        )
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if args.once:
        asyncio.run(run_once(settings))
        return 0

    app = create_app(settings)
    logger.info("HTTP server starting on port %s...", settings.port)
    # uvicorn exits the process if the port cannot be bound
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
