"""
Alert Debouncer
Tracks when each service was last alerted and rate-limits repeat alerts.
"""
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional


class AlertDebouncer:
    """Per-service cool-down between proactive alerts.

    A service is either never alerted or alerted at some time t. A new alert
    is allowed once at least `cooldown` has elapsed since t. Recovery does not
    reset t, so a flapping service gets at most one alert per window.
    """

    def __init__(self, cooldown: timedelta = timedelta(minutes=10),
                 clock: Callable[[], datetime] = datetime.now):
        self.cooldown = cooldown
        self.clock = clock
        self._last_alert_sent: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def should_alert(self, service: str, now: Optional[datetime] = None) -> bool:
        """Check if enough time has passed since the last alert for this service."""
        now = now or self.clock()
        with self._lock:
            last_sent = self._last_alert_sent.get(service)
        if last_sent is None:
            return True
        return now - last_sent >= self.cooldown

    def mark_alerted(self, service: str, now: Optional[datetime] = None) -> datetime:
        """Record that an alert was sent (or attempted) for this service."""
        now = now or self.clock()
        with self._lock:
            self._last_alert_sent[service] = now
        return now

    def last_alert(self, service: str) -> Optional[datetime]:
        with self._lock:
            return self._last_alert_sent.get(service)

    def snapshot(self) -> Dict[str, datetime]:
        """Copy of the alert record, safe to read from other tasks."""
        with self._lock:
            return dict(self._last_alert_sent)
