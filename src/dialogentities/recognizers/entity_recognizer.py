"""Entity Recognizer

Single entry point for the dialog layer: entity lookup, time resolution,
number and yes/no parsing and choice matching, all driven by one set of
settings and one clock.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Union

from ..core.clock import Clock, SystemClock
from ..core.config_manager import ConfigManager, RecognizerSettings
from ..core.error_handler import ErrorHandler
from ..core.logging_manager import LoggingManager
from .choice_matcher import ChoiceMatcher, FindMatchResult
from .entities import Entity, find_all_entities, find_entity
from .primitives import parse_boolean, parse_number
from .temporal_extractor import (
    RecognitionStatus,
    TemporalExtractor,
    TemporalParser
)
from .temporal_resolver import TemporalResolver


class EntityRecognizer:
    """Recognizes and resolves entities in user utterances."""

    def __init__(self, settings: Optional[RecognizerSettings] = None,
                 clock: Optional[Clock] = None,
                 parser: Optional[TemporalParser] = None):
        """Initialize the recognizer.

        Args:
            settings: Recognizer settings, library defaults when omitted
            clock: Time source for "today" and the local offset
            parser: Natural language date parser, dateparser-backed by default
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.settings = settings or RecognizerSettings()
        self.clock = clock or SystemClock()
        self.error_handler = ErrorHandler(self.logger)

        self.extractor = TemporalExtractor(parser, self.settings.temporal)
        self.resolver = TemporalResolver(self.clock, self.settings.temporal.timezone_offset)
        self.matcher = ChoiceMatcher(self.settings.matching.threshold)

    @classmethod
    def from_config(cls, config_manager: ConfigManager, clock: Optional[Clock] = None,
                    parser: Optional[TemporalParser] = None) -> 'EntityRecognizer':
        """Build a recognizer from loaded settings and apply their logging section."""
        settings = config_manager.load_config()
        LoggingManager().configure(settings.logging)
        return cls(settings, clock, parser)

    def find_entity(self, entities: Iterable[Entity], entity_type: str) -> Optional[Entity]:
        return find_entity(entities, entity_type)

    def find_all_entities(self, entities: Iterable[Entity], entity_type: str) -> List[Entity]:
        return find_all_entities(entities, entity_type)

    def recognize_time(self, utterance: str, ref_date: Optional[datetime] = None) -> Optional[Entity]:
        """Extract the first time expression of ``utterance`` as a duration entity.

        Parser failures are recorded through the error handler and yield None.
        """
        recognition = self.extractor.recognize(utterance, ref_date)
        if recognition.status is RecognitionStatus.FAILED:
            self.error_handler.handle_error(recognition.error, context="recognize_time")
        return recognition.entity

    def resolve_time(self, entities: Iterable[Entity],
                     timezone_offset: Optional[float] = None) -> Optional[datetime]:
        return self.resolver.resolve(entities, timezone_offset)

    def parse_time(self, entities: Union[str, Iterable[Entity]],
                   timezone_offset: Optional[float] = None) -> Optional[datetime]:
        """Resolve raw text or an entity list into a timestamp.

        Text is anchored on the clock's current time.
        """
        if isinstance(entities, str):
            entity = self.recognize_time(entities, self.clock.now())
            entities = [entity] if entity else []
        return self.resolve_time(entities, timezone_offset)

    def parse_number(self, entities: Union[str, Iterable[Entity]]) -> Optional[Union[int, float]]:
        return parse_number(entities)

    def parse_boolean(self, utterance: str) -> Optional[bool]:
        return parse_boolean(utterance)

    def find_all_matches(self, choices: Sequence[str], utterance: str,
                         threshold: Optional[float] = None) -> List[FindMatchResult]:
        return self.matcher.find_all_matches(choices, utterance, threshold)

    def find_best_match(self, choices: Sequence[str], utterance: str,
                        threshold: Optional[float] = None) -> Optional[FindMatchResult]:
        return self.matcher.find_best_match(choices, utterance, threshold)
