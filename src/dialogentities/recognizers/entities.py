"""Entity model for recognizer output.

Entities are tagged spans of an utterance. Date/time entities carry a
resolution, modelled as one dataclass per resolution kind.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from dateutil import parser as date_parser


class EntityType(str, Enum):
    """Entity type tags understood by the recognizers."""
    DATE = "builtin.datetime.date"
    TIME = "builtin.datetime.time"
    DURATION = "chrono.duration"
    NUMBER = "builtin.number"


@dataclass(frozen=True)
class DateResolution:
    """A resolved calendar date, ISO-8601 (``2026-10-19``)."""
    date: str
    resolution_type: str = field(default=EntityType.DATE.value, init=False)


@dataclass(frozen=True)
class TimeResolution:
    """A partial time such as ``T09`` or ``T18:30``."""
    time: str
    comment: Optional[str] = None
    resolution_type: str = field(default=EntityType.TIME.value, init=False)


@dataclass(frozen=True)
class DurationResolution:
    """A fully resolved span produced by the free-text extractor."""
    start: datetime
    end: Optional[datetime] = None
    ref: Optional[datetime] = None
    resolution_type: str = field(default=EntityType.DURATION.value, init=False)


@dataclass(frozen=True)
class GenericResolution:
    """Resolution of a kind the recognizers do not interpret."""
    resolution_type: str
    values: Dict[str, Any] = field(default_factory=dict)


Resolution = Union[DateResolution, TimeResolution, DurationResolution, GenericResolution]


@dataclass(frozen=True)
class Entity:
    """A tagged span recognized in an utterance."""
    type: str
    text: str
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    score: Optional[float] = None
    resolution: Optional[Resolution] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Entity':
        """Build an entity from a LUIS-style payload.

        Accepts both ``startIndex``/``endIndex`` and snake_case keys, and
        ``entity`` or ``text`` for the matched substring.
        """
        resolution = data.get('resolution')
        return cls(
            type=data['type'],
            text=data.get('entity', data.get('text', '')),
            start_index=data.get('startIndex', data.get('start_index')),
            end_index=data.get('endIndex', data.get('end_index')),
            score=data.get('score'),
            resolution=parse_resolution(resolution) if resolution else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the LUIS-style payload shape."""
        data: Dict[str, Any] = {'type': self.type, 'entity': self.text}
        if self.start_index is not None:
            data['startIndex'] = self.start_index
        if self.end_index is not None:
            data['endIndex'] = self.end_index
        if self.score is not None:
            data['score'] = self.score
        if self.resolution is not None:
            data['resolution'] = resolution_to_dict(self.resolution)
        return data


def _to_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return date_parser.isoparse(value)


def _required(data: Dict[str, Any], key: str) -> Any:
    value = data[key]
    if value is None:
        raise KeyError(key)
    return value


def parse_resolution(data: Dict[str, Any]) -> Resolution:
    """Convert a raw resolution payload into its resolution variant.

    Raises:
        ValueError: If a date, time or duration payload lacks its value
    """
    resolution_type = data.get('resolution_type', '')

    try:
        if resolution_type == EntityType.DATE:
            return DateResolution(date=_required(data, 'date'))
        if resolution_type == EntityType.TIME:
            return TimeResolution(time=_required(data, 'time'), comment=data.get('comment'))
        if resolution_type == EntityType.DURATION:
            return DurationResolution(
                start=_to_datetime(_required(data, 'start')),
                end=_to_datetime(data.get('end')),
                ref=_to_datetime(data.get('ref')),
            )
    except KeyError as e:
        raise ValueError(f"{resolution_type} resolution is missing {e}") from e

    values = {k: v for k, v in data.items() if k != 'resolution_type'}
    return GenericResolution(resolution_type=resolution_type, values=values)


def resolution_to_dict(resolution: Resolution) -> Dict[str, Any]:
    data: Dict[str, Any] = {'resolution_type': resolution.resolution_type}
    if isinstance(resolution, DateResolution):
        data['date'] = resolution.date
    elif isinstance(resolution, TimeResolution):
        data['time'] = resolution.time
        if resolution.comment is not None:
            data['comment'] = resolution.comment
    elif isinstance(resolution, DurationResolution):
        data['start'] = resolution.start.isoformat()
        if resolution.end is not None:
            data['end'] = resolution.end.isoformat()
        if resolution.ref is not None:
            data['ref'] = resolution.ref.isoformat()
    else:
        data.update(resolution.values)
    return data


def find_entity(entities: Iterable[Entity], entity_type: str) -> Optional[Entity]:
    """Return the first entity of the given type, or None."""
    for entity in entities:
        if entity.type == entity_type:
            return entity
    return None


def find_all_entities(entities: Iterable[Entity], entity_type: str) -> List[Entity]:
    """Return every entity of the given type, in order."""
    return [entity for entity in entities if entity.type == entity_type]
