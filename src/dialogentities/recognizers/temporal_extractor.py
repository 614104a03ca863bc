"""Free-Text Temporal Extractor

Runs a natural language date parser over an utterance and turns its first
match into a ``chrono.duration`` entity whose score is the share of the
utterance the match covers.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from dateparser.search import search_dates

from ..core.config_manager import TemporalConfig
from ..core.error_handler import TemporalParseError
from ..core.logging_manager import LoggingManager
from .entities import DurationResolution, Entity, EntityType


# Text allowed between two dates for them to read as one range
RANGE_CONNECTOR = re.compile(r"^\s*(?:from\s+)?(?:to|until|till|through|thru|-|–)\s*$", re.IGNORECASE)


@dataclass
class ParsedTemporal:
    """A single match reported by a temporal parser."""
    text: str
    index: int
    start: datetime
    end: Optional[datetime] = None
    ref: Optional[datetime] = None


class TemporalParser:
    """Interface of the natural language date parser used by the extractor."""

    def parse(self, text: str, ref_date: Optional[datetime] = None) -> List[ParsedTemporal]:
        """Return matches in the parser's own ranking, best first."""
        raise NotImplementedError


class DateparserTemporalParser(TemporalParser):
    """TemporalParser backed by ``dateparser.search.search_dates``."""

    def __init__(self, config: Optional[TemporalConfig] = None):
        self.config = config or TemporalConfig()
        self.logger = LoggingManager.get_logger(__name__)

    def _build_settings(self, ref_date: Optional[datetime]) -> Dict[str, Any]:
        settings: Dict[str, Any] = {
            "PREFER_DATES_FROM": self.config.prefer_dates_from,
            "RETURN_AS_TIMEZONE_AWARE": False,
        }
        if ref_date is not None:
            # dateparser expects a naive wall-clock base
            settings["RELATIVE_BASE"] = ref_date.replace(tzinfo=None)
        return settings

    def parse(self, text: str, ref_date: Optional[datetime] = None) -> List[ParsedTemporal]:
        hits = search_dates(
            text,
            languages=self.config.languages,
            settings=self._build_settings(ref_date),
        )
        if not hits:
            return []

        matches = []
        cursor = 0
        lowered = text.lower()
        for matched_text, start in hits:
            index = lowered.find(matched_text.lower(), cursor)
            if index < 0:
                index = max(lowered.find(matched_text.lower()), 0)
            else:
                cursor = index + len(matched_text)
            matches.append(ParsedTemporal(text=matched_text, index=index, start=start, ref=ref_date))

        if self.config.detect_ranges:
            matches = self._merge_first_range(text, matches)
        return matches

    def _merge_first_range(self, text: str, matches: List[ParsedTemporal]) -> List[ParsedTemporal]:
        """Fold the first two matches into one when only a range connector separates them."""
        if len(matches) < 2:
            return matches

        first, second = matches[0], matches[1]
        first_end = first.index + len(first.text)
        if second.index < first_end or not RANGE_CONNECTOR.match(text[first_end:second.index]):
            return matches

        self.logger.debug(f"Merged range '{first.text}' .. '{second.text}'")
        merged = ParsedTemporal(
            text=text[first.index:second.index + len(second.text)],
            index=first.index,
            start=first.start,
            end=second.start,
            ref=first.ref,
        )
        return [merged] + matches[2:]


class RecognitionStatus(Enum):
    """Outcome of a free-text recognition."""
    MATCHED = "matched"
    NO_MATCH = "no_match"
    FAILED = "failed"


@dataclass
class TemporalRecognition:
    """Result of running the extractor over one utterance."""
    status: RecognitionStatus
    entity: Optional[Entity] = None
    error: Optional[TemporalParseError] = None

    @property
    def diagnostic(self) -> Optional[str]:
        return self.error.message if self.error else None


class TemporalExtractor:
    """Turns the first temporal expression of an utterance into a duration entity."""

    def __init__(self, parser: Optional[TemporalParser] = None,
                 config: Optional[TemporalConfig] = None):
        """
        Args:
            parser: Parser to delegate to, dateparser-backed by default
            config: Temporal settings for the default parser
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.parser = parser or DateparserTemporalParser(config)

    def recognize(self, utterance: str, ref_date: Optional[datetime] = None) -> TemporalRecognition:
        """Extract the parser's first temporal match from ``utterance``.

        Parser exceptions are caught and reported as a FAILED recognition.

        Args:
            utterance: Raw user text
            ref_date: Anchor for relative expressions such as "tomorrow"

        Returns:
            Recognition with status, entity and failure detail
        """
        if not utterance or not utterance.strip():
            return TemporalRecognition(status=RecognitionStatus.NO_MATCH)

        try:
            matches = self.parser.parse(utterance, ref_date)
        except Exception as e:
            error = TemporalParseError(f"Error recognizing time: {e}", utterance=utterance)
            return TemporalRecognition(status=RecognitionStatus.FAILED, error=error)

        if not matches:
            self.logger.debug("No temporal expression found")
            return TemporalRecognition(status=RecognitionStatus.NO_MATCH)

        match = matches[0]
        entity = Entity(
            type=EntityType.DURATION.value,
            text=match.text,
            start_index=match.index,
            end_index=match.index + len(match.text),
            score=len(match.text) / len(utterance),
            resolution=DurationResolution(start=match.start, end=match.end, ref=match.ref),
        )
        self.logger.debug(f"Recognized '{match.text}' as {match.start.isoformat()} (score={entity.score:.2f})")
        return TemporalRecognition(status=RecognitionStatus.MATCHED, entity=entity)


def recognize_time(utterance: str, ref_date: Optional[datetime] = None,
                   parser: Optional[TemporalParser] = None) -> Optional[Entity]:
    """Return a duration entity for the first time expression, or None.

    Failures are logged and reported as None.
    """
    recognition = TemporalExtractor(parser).recognize(utterance, ref_date)
    if recognition.status is RecognitionStatus.FAILED:
        LoggingManager.get_logger(__name__).warning(recognition.diagnostic)
    return recognition.entity
