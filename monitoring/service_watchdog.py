"""
Service Watchdog
Polls the watched services on a fixed interval and alerts the operator when
one stops running, rate-limited by the alert debouncer.
"""
import asyncio
import logging
from datetime import timedelta
from typing import Awaitable, Callable, List, Sequence

from alerts.service import Notifier
from monitoring.alert_debouncer import AlertDebouncer
from monitoring.messages import service_down_message
from monitoring.service_prober import ServiceProber

logger = logging.getLogger(__name__)

CHECK_INTERVAL = 300  # 5 minutes in seconds


class ServiceWatchdog:
    """Perpetual poll loop: probe -> debounce -> notify, one service at a time."""

    def __init__(
        self,
        services: Sequence[str],
        recipient: str,
        prober: ServiceProber,
        notifier: Notifier,
        debouncer: AlertDebouncer = None,
        interval_seconds: float = CHECK_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.services = tuple(services)
        self.recipient = recipient
        self.prober = prober
        self.notifier = notifier
        self.debouncer = debouncer or AlertDebouncer(cooldown=timedelta(minutes=10))
        self.interval_seconds = interval_seconds
        self._sleep = sleep
        self.cycle_count = 0

    async def check_service(self, service: str) -> bool:
        """Evaluate one service. Returns True if an alert was sent (or attempted)."""
        running = await asyncio.to_thread(self.prober.is_running, service)
        if running:
            return False

        now = self.debouncer.clock()
        if not self.debouncer.should_alert(service, now):
            logger.info("Service %s is down, alert suppressed (cool-down active)", service)
            return False

        logger.warning("Service %s is not running. Sending alert...", service)
        delivered = await self.notifier.send(self.recipient, service_down_message(service))
        if not delivered:
            logger.warning("Alert for %s was not delivered; it still counts for the cool-down", service)
        self.debouncer.mark_alerted(service, now)
        return True

    async def run_cycle(self) -> List[str]:
        """Run one poll cycle over every watched service, in declared order."""
        self.cycle_count += 1
        alerted = []
        for service in self.services:
            try:
                if await self.check_service(service):
                    alerted.append(service)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Unexpected error checking service %s", service)
        return alerted

    async def run_forever(self):
        """Poll until cancelled. Fixed sleep between cycles; drift is accepted."""
        logger.info(
            "Watching %d service(s) every %ss: %s",
            len(self.services), self.interval_seconds, ", ".join(self.services),
        )
        while True:
            await self.run_cycle()
            await self._sleep(self.interval_seconds)
