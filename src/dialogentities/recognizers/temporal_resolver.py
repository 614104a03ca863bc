"""Temporal Resolver

Merges date, time and duration fragments from recognized entities into a
single timestamp.

The first date and the first time fragment win; later ones are ignored.
A duration fragment already carries a merged date and time, so it
short-circuits the scan and its start is returned as-is, whatever other
fragments the list holds.

Time comments (``"ampm"``) are not folded into the hour: only 24-hour time
strings resolve correctly.
"""

from datetime import datetime
from typing import Iterable, Optional, Union

from dateutil import parser as date_parser

from ..core.clock import Clock, SystemClock
from ..core.logging_manager import LoggingManager
from .entities import (
    DateResolution,
    DurationResolution,
    Entity,
    GenericResolution,
    TimeResolution
)
from .temporal_extractor import recognize_time


def normalize_time(time: str) -> str:
    """Expand LUIS partial times: ``T09`` -> ``T09:00:00``, ``T18:30`` -> ``T18:30:00``."""
    time = time.strip()
    if len(time) == 3:
        return time + ':00:00'
    if len(time) == 6:
        return time + ':00'
    return time


def format_offset(timezone_offset: float) -> str:
    """Render an hours-to-UTC offset as an ISO-8601 suffix.

    A positive offset lies behind UTC, so ``7`` renders as ``-07:00``.
    """
    sign = '-' if timezone_offset > 0 else '+'
    total_minutes = int(round(abs(timezone_offset) * 60))
    hours, minutes = divmod(total_minutes, 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


class TemporalResolver:
    """Resolves entity lists into absolute timestamps."""

    def __init__(self, clock: Optional[Clock] = None,
                 default_timezone_offset: Optional[float] = None):
        """
        Args:
            clock: Source of "today" and the local offset
            default_timezone_offset: Offset used when a call supplies none,
                instead of the clock's local offset
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.clock = clock or SystemClock()
        self.default_timezone_offset = default_timezone_offset

    def resolve(self, entities: Iterable[Entity],
                timezone_offset: Optional[float] = None) -> Optional[datetime]:
        """Resolve entities into a timestamp.

        Args:
            entities: Recognized entities, scanned in order
            timezone_offset: Hours to add to local time to reach UTC

        Returns:
            The resolved timestamp, or None when no date, time or duration
            fragment is present
        """
        date: Optional[str] = None
        time: Optional[str] = None

        for entity in entities:
            resolution = entity.resolution
            if resolution is None:
                continue

            if isinstance(resolution, DurationResolution):
                self.logger.debug(f"Duration '{entity.text}' resolved to {resolution.start}")
                return resolution.start
            elif isinstance(resolution, DateResolution):
                if date is None:
                    date = resolution.date
            elif isinstance(resolution, TimeResolution):
                if time is None:
                    time = normalize_time(resolution.time)
            elif isinstance(resolution, GenericResolution):
                continue

        if date is None and time is None:
            return None

        if time is None:
            return self._parse(date)

        if date is None:
            # "at 9am" means today
            date = self.clock.now().date().isoformat()

        if timezone_offset is None:
            timezone_offset = self.default_timezone_offset
        if timezone_offset is None:
            timezone_offset = self.clock.timezone_offset()

        return self._parse(f"{date}{time}{format_offset(timezone_offset)}")

    def _parse(self, value: str) -> Optional[datetime]:
        try:
            return date_parser.isoparse(value)
        except (ValueError, OverflowError) as e:
            self.logger.warning(f"Could not parse composed timestamp '{value}': {e}")
            return None


def resolve_time(entities: Iterable[Entity], timezone_offset: Optional[float] = None,
                 clock: Optional[Clock] = None) -> Optional[datetime]:
    """Resolve entities into a timestamp, see ``TemporalResolver.resolve``."""
    return TemporalResolver(clock).resolve(entities, timezone_offset)


def parse_time(entities: Union[str, Iterable[Entity]], clock: Optional[Clock] = None) -> Optional[datetime]:
    """Resolve either raw text or an entity list into a timestamp.

    Text is first run through the free-text extractor.
    """
    if isinstance(entities, str):
        entity = recognize_time(entities)
        entities = [entity] if entity else []
    return resolve_time(entities, clock=clock)
