"""Time sources for temporal resolution.

Offsets follow the "hours to add to local time to reach UTC" convention,
so a clock running at UTC-07:00 reports an offset of ``7`` and one at
UTC+02:00 reports ``-2``.
"""

from datetime import datetime, timedelta
from typing import Optional

from dateutil.tz import tzlocal


def offset_hours(utcoffset: Optional[timedelta]) -> float:
    """Convert a ``utcoffset()`` value into the hours-to-UTC convention."""
    if utcoffset is None:
        return 0.0
    return -utcoffset.total_seconds() / 3600


class Clock:
    """Source of the current time and local timezone offset."""

    def now(self) -> datetime:
        raise NotImplementedError

    def timezone_offset(self) -> float:
        """Hours to add to local time to reach UTC."""
        return offset_hours(self.now().utcoffset())


class SystemClock(Clock):
    """Wall clock in the host's local timezone."""

    def now(self) -> datetime:
        return datetime.now(tzlocal())


class FixedClock(Clock):
    """Clock frozen at a given instant, for deterministic resolution."""

    def __init__(self, instant: datetime, timezone_offset: Optional[float] = None):
        """
        Args:
            instant: The moment ``now()`` reports
            timezone_offset: Overrides the offset derived from ``instant``;
                required for naive instants to be meaningful
        """
        self.instant = instant
        self._timezone_offset = timezone_offset

    def now(self) -> datetime:
        return self.instant

    def timezone_offset(self) -> float:
        if self._timezone_offset is not None:
            return self._timezone_offset
        return super().timezone_offset()
