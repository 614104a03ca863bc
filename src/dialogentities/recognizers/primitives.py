"""Number and yes/no parsing for short prompts."""

import re
from typing import Iterable, Optional, Union

from .entities import Entity, EntityType, find_entity


YES_PATTERN = re.compile(r"(1|y|yes|yep|sure|ok|true)", re.IGNORECASE)
NO_PATTERN = re.compile(r"(0|n|no|nope|not|false)", re.IGNORECASE)
NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\d*\.?\d+)")


def parse_number(entities: Union[str, Iterable[Entity]]) -> Optional[Union[int, float]]:
    """Extract the first number from text or from a ``builtin.number`` entity.

    Tokens with a decimal point come back as float, others as int.
    """
    if isinstance(entities, str):
        text: Optional[str] = entities.strip()
    else:
        entity = find_entity(entities, EntityType.NUMBER)
        text = entity.text if entity else None

    if not text:
        return None

    match = NUMBER_PATTERN.search(text)
    if not match:
        return None

    token = match.group(0)
    return float(token) if '.' in token else int(token)


def parse_boolean(utterance: str) -> Optional[bool]:
    """Map yes/no style answers to True/False, anything else to None."""
    utterance = utterance.strip()
    if YES_PATTERN.fullmatch(utterance):
        return True
    if NO_PATTERN.fullmatch(utterance):
        return False
    return None
