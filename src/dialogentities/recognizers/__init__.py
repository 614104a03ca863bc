"""Entity Recognizers

Temporal resolution, free-text time extraction, fuzzy choice matching and
primitive value parsing for dialog utterances.
"""

from .choice_matcher import ChoiceMatcher, FindMatchResult, find_all_matches, find_best_match
from .entities import (
    DateResolution,
    DurationResolution,
    Entity,
    EntityType,
    GenericResolution,
    TimeResolution,
    find_all_entities,
    find_entity,
    parse_resolution
)
from .entity_recognizer import EntityRecognizer
from .primitives import parse_boolean, parse_number
from .temporal_extractor import (
    DateparserTemporalParser,
    ParsedTemporal,
    RecognitionStatus,
    TemporalExtractor,
    TemporalParser,
    TemporalRecognition,
    recognize_time
)
from .temporal_resolver import TemporalResolver, parse_time, resolve_time

__all__ = [
    "ChoiceMatcher",
    "FindMatchResult",
    "find_all_matches",
    "find_best_match",
    "DateResolution",
    "DurationResolution",
    "Entity",
    "EntityType",
    "GenericResolution",
    "TimeResolution",
    "find_all_entities",
    "find_entity",
    "parse_resolution",
    "EntityRecognizer",
    "parse_boolean",
    "parse_number",
    "DateparserTemporalParser",
    "ParsedTemporal",
    "RecognitionStatus",
    "TemporalExtractor",
    "TemporalParser",
    "TemporalRecognition",
    "recognize_time",
    "TemporalResolver",
    "parse_time",
    "resolve_time"
]
