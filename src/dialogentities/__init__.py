"""dialogentities - Entity Recognition for Dialog Utterances

Resolves date/time mentions into timestamps and matches user text against
lists of choices for conversational applications.
"""

__version__ = "0.1.0"
__description__ = "Entity recognition helpers for dialog utterances"

from .core import ConfigManager, RecognizerSettings
from .recognizers import (
    EntityRecognizer,
    Entity,
    EntityType,
    FindMatchResult,
    find_all_entities,
    find_all_matches,
    find_best_match,
    find_entity,
    parse_boolean,
    parse_number,
    parse_time,
    recognize_time,
    resolve_time
)

__all__ = [
    "ConfigManager",
    "RecognizerSettings",
    "EntityRecognizer",
    "Entity",
    "EntityType",
    "FindMatchResult",
    "find_all_entities",
    "find_all_matches",
    "find_best_match",
    "find_entity",
    "parse_boolean",
    "parse_number",
    "parse_time",
    "recognize_time",
    "resolve_time"
]
