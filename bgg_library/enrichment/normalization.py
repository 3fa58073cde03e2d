"""
Validation rules applied to individual values decoded from a service response.

Each rule takes one loosely-typed decoded value and returns a typed value or
``None`` (unknown). Out-of-range input converts to ``None``; no rule raises.
"""

import math
from typing import Any, List, Optional

CONFIDENCE_LEVELS = ("high", "medium", "low")

MIN_SUGGESTED_AGE = 1
MAX_SUGGESTED_AGE = 21
MIN_BGG_RATING = 0.0
MAX_BGG_RATING = 10.0
BGG_RATING_DECIMALS = 1


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not numbers here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def integer_in_range(value: Any, min_value: int, max_value: Optional[int] = None) -> Optional[int]:
    """Floor of a numeric value if it lands in ``[min_value, max_value]``."""
    if not _is_number(value):
        return None
    floored = math.floor(value)
    if floored < min_value:
        return None
    if max_value is not None and floored > max_value:
        return None
    return floored


def decimal_in_range(value: Any, min_value: float, max_value: float, decimals: int) -> Optional[float]:
    """Value rounded half-up to ``decimals`` places if it lies in ``[min_value, max_value]``."""
    if not _is_number(value) or not min_value <= value <= max_value:
        return None
    scale = 10 ** decimals
    return math.floor(value * scale + 0.5) / scale


def positive_integer(value: Any) -> Optional[int]:
    return integer_in_range(value, 1)


def trimmed_string(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def string_list(value: Any) -> Optional[List[str]]:
    """Trimmed non-blank strings from a list, in order; ``None`` if none remain."""
    if not isinstance(value, list):
        return None
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items or None


def confidence_level(value: Any) -> str:
    return value if value in CONFIDENCE_LEVELS else "low"


def suggested_age(value: Any) -> Optional[int]:
    return integer_in_range(value, MIN_SUGGESTED_AGE, MAX_SUGGESTED_AGE)


def bgg_rating(value: Any) -> Optional[float]:
    return decimal_in_range(value, MIN_BGG_RATING, MAX_BGG_RATING, BGG_RATING_DECIMALS)


def bgg_rank(value: Any) -> Optional[int]:
    return positive_integer(value)
