"""
Pre-flight relevance filter for farming analysis requests.

Runs before any prompt is built, so off-topic or nonsense queries never
cost an LLM call.
"""
import logging
import re
from typing import Optional

from kisanai.errors import InputRejectedError
from kisanai.services.farming.constants import (
    FARMING_KEYWORDS,
    GIBBERISH_MIN_LENGTH,
    MAX_FARM_SIZE,
    MIN_FARM_SIZE,
    NON_FARMING_KEYWORDS,
)

logger = logging.getLogger(__name__)

NOT_APPLICABLE_MESSAGE = "NOT_APPLICABLE: Query is not related to farming or agriculture"

# Leading numeric prefix, so "5 acres" reads as 5
_LEADING_NUMBER_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_VOWEL_RE = re.compile(r"[aeiou]", re.IGNORECASE)
_CONSONANT_RE = re.compile(r"[bcdfghjklmnpqrstvwxyz]", re.IGNORECASE)


def parse_farm_size(farm_size) -> Optional[float]:
    """Leading number of the farm size text, or None when it has none."""
    if farm_size is None:
        return None
    match = _LEADING_NUMBER_RE.match(str(farm_size))
    if not match:
        return None
    return float(match.group(0))


def is_valid_farm_size(farm_size) -> bool:
    size = parse_farm_size(farm_size)
    return size is not None and MIN_FARM_SIZE < size < MAX_FARM_SIZE


def is_gibberish(technique: str) -> bool:
    if len(technique) <= GIBBERISH_MIN_LENGTH:
        return False
    return not _VOWEL_RE.search(technique) or not _CONSONANT_RE.search(technique)


def is_farming_related(technique: str, farm_size) -> bool:
    """All four checks must pass: size range, allow-list hit, no deny-list hit, not gibberish."""
    technique = technique or ""
    technique_lower = technique.lower()

    has_farming_keyword = any(keyword in technique_lower for keyword in FARMING_KEYWORDS)
    has_non_farming_keyword = any(keyword in technique_lower for keyword in NON_FARMING_KEYWORDS)

    return (
        is_valid_farm_size(farm_size)
        and has_farming_keyword
        and not has_non_farming_keyword
        and not is_gibberish(technique)
    )


def ensure_farming_related(technique: str, farm_size) -> None:
    if not is_farming_related(technique, farm_size):
        logger.warning(f"Rejected non-farming query: technique={technique[:50]!r}, farm_size={farm_size!r}")
        raise InputRejectedError(NOT_APPLICABLE_MESSAGE)
