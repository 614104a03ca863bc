"""Fuzzy Choice Matcher

Scores an utterance against a fixed list of choices. Each choice gets the
score of exactly one tier:

1. the choice contains the utterance: len(utterance) / len(choice)
2. the utterance contains the choice: len(choice) / len(utterance)
3. otherwise the utterance's space-separated tokens found inside the choice
   are concatenated and scored as len(tokens) / len(choice)

Only choices scoring strictly above the threshold are returned.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.logging_manager import LoggingManager


DEFAULT_THRESHOLD = 0.6

logger = LoggingManager.get_logger(__name__)


@dataclass
class FindMatchResult:
    """A choice that scored above the threshold."""
    index: int
    entity: str
    score: float


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator else 0.0


def score_choice(choice: str, utterance: str) -> float:
    """Score one choice against an already trimmed, lower-cased utterance."""
    value = choice.strip().lower()

    if utterance in value:
        return _ratio(len(utterance), len(value))
    if value in utterance:
        return _ratio(len(value), len(utterance))

    matched = ''.join(token for token in utterance.split(' ') if token in value)
    return _ratio(len(matched), len(value))


def find_all_matches(choices: Sequence[str], utterance: str,
                     threshold: float = DEFAULT_THRESHOLD) -> List[FindMatchResult]:
    """Return every choice scoring above ``threshold``, in list order."""
    utterance = utterance.strip().lower()
    matches = []

    for index, choice in enumerate(choices):
        score = score_choice(choice, utterance)
        if score > threshold:
            matches.append(FindMatchResult(index=index, entity=choice, score=score))

    logger.debug(f"{len(matches)} of {len(choices)} choices matched '{utterance}' above {threshold}")
    return matches


def find_best_match(choices: Sequence[str], utterance: str,
                    threshold: float = DEFAULT_THRESHOLD) -> Optional[FindMatchResult]:
    """Return the highest scoring match; the lowest index wins ties."""
    best: Optional[FindMatchResult] = None
    for match in find_all_matches(choices, utterance, threshold):
        if best is None or match.score > best.score:
            best = match
    return best


class ChoiceMatcher:
    """Choice matching bound to a configured default threshold."""

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def find_all_matches(self, choices: Sequence[str], utterance: str,
                         threshold: Optional[float] = None) -> List[FindMatchResult]:
        return find_all_matches(choices, utterance, self.threshold if threshold is None else threshold)

    def find_best_match(self, choices: Sequence[str], utterance: str,
                        threshold: Optional[float] = None) -> Optional[FindMatchResult]:
        return find_best_match(choices, utterance, self.threshold if threshold is None else threshold)
