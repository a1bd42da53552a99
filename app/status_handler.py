"""
On-demand status queries from the operator.
"""
import asyncio
import logging
from typing import Optional, Sequence

from alerts.service import Notifier
from monitoring.messages import status_message
from monitoring.service_prober import ServiceProber

logger = logging.getLogger(__name__)


class StatusQueryHandler:
    """Replies to a "status" message with the live state of every watched service.

    Independent of the poll loop: it never reads or writes the alert record.
    """

    def __init__(self, services: Sequence[str], prober: ServiceProber,
                 notifier: Notifier, keyword: str = "status"):
        self.services = tuple(services)
        self.prober = prober
        self.notifier = notifier
        self.keyword = keyword.lower()

    def is_status_request(self, body: Optional[str]) -> bool:
        return (body or "").lower() == self.keyword

    async def handle(self, sender: Optional[str], body: Optional[str]) -> int:
        """Handle one inbound message. Returns the number of replies sent."""
        logger.info("Message received from %s: %s", sender, body)

        if not self.is_status_request(body):
            return 0
        if not sender:
            logger.warning("Status request without a sender address, ignoring")
            return 0

        replies = 0
        for service in self.services:
            running = await asyncio.to_thread(self.prober.is_running, service)
            await self.notifier.send(sender, status_message(service, running))
            replies += 1
        return replies
