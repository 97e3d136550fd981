"""
Timestamps

ISO-8601 UTC timestamps for entity creation, updates and status history.
"""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Clock:
    """
    Issues ISO-8601 timestamps that never go backwards.

    Status history relies on each record's timestamp being >= the previous one,
    so a wall clock that steps back (NTP adjustment, manual change) is clamped
    to the last value issued.
    """

    def __init__(self, now: Optional[Callable[[], datetime]] = None):
        """
        Initialize the clock.

        Args:
            now: Optional source of timezone-aware datetimes (defaults to UTC wall clock)
        """
        self._now = now or utc_now
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = self._now()
            if current.tzinfo is None:
                current = current.replace(tzinfo=timezone.utc)
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
            return current

    def timestamp(self) -> str:
        """Current time as an ISO-8601 string with millisecond precision."""
        return self.now().isoformat(timespec='milliseconds')
