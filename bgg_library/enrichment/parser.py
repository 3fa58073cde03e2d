"""
Parsing of knowledge service responses into typed game fields.

Responses are decoded into plain dictionaries first, then every key is
re-validated through the normalization rules; declared types in the response
are never trusted.
"""

import json
import logging
import re
from typing import Any, Dict, List

from ..models import EnrichedFields
from . import normalization as rules

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```[\w+-]*")
_TRAILING_FENCE = "```"

# Response key -> (EnrichedFields attribute, rule)
FIELD_RULES = {
    "title": ("title", rules.trimmed_string),
    "publisher": ("publisher", rules.trimmed_string),
    "year": ("year", rules.positive_integer),
    "minPlayers": ("min_players", rules.positive_integer),
    "maxPlayers": ("max_players", rules.positive_integer),
    "playTimeMin": ("play_time_min", rules.positive_integer),
    "playTimeMax": ("play_time_max", rules.positive_integer),
    "description": ("description", rules.trimmed_string),
    "categories": ("categories", rules.string_list),
    "bggRating": ("bgg_rating", rules.bgg_rating),
    "bggRank": ("bgg_rank", rules.bgg_rank),
    "suggestedAge": ("suggested_age", rules.suggested_age),
}


def clean_response_text(response_text: str) -> str:
    """Strip surrounding whitespace and markdown code fences."""
    cleaned = (response_text or "").strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    if cleaned.endswith(_TRAILING_FENCE):
        cleaned = cleaned[:-len(_TRAILING_FENCE)]
    return cleaned.strip()


def _decode(response_text: str) -> Any:
    cleaned = clean_response_text(response_text)
    if not cleaned:
        return None
    try:
        return json.loads(cleaned)
    except (ValueError, RecursionError):
        logger.warning(f"Failed to decode service response: {response_text[:200]!r}")
        return None


def fields_from_mapping(data: Dict[str, Any]) -> EnrichedFields:
    """Apply the normalization rules key by key; unknown keys are ignored."""
    values = {attribute: rule(data.get(key)) for key, (attribute, rule) in FIELD_RULES.items()}
    return EnrichedFields(confidence=rules.confidence_level(data.get("confidence")), **values)


def parse_enriched_fields(response_text: str) -> EnrichedFields:
    """
    Parse a single-game response.

    Never raises: malformed or empty text yields an all-unknown result with
    low confidence, the same shape as a service that did not know the game.

    Args:
        response_text: Raw text returned by the service

    Returns:
        Normalized fields
    """
    decoded = _decode(response_text)
    if not isinstance(decoded, dict):
        return EnrichedFields()
    return fields_from_mapping(decoded)


def parse_games(response_text: str) -> List[EnrichedFields]:
    """
    Parse a response that may describe several games.

    Accepts ``{"games": [...]}``, a single game object carrying a ``title``
    key, or a bare array. Entries that are not objects are dropped.

    Args:
        response_text: Raw text returned by the service

    Returns:
        List of normalized fields, empty if nothing usable was found
    """
    decoded = _decode(response_text)

    if isinstance(decoded, dict):
        if isinstance(decoded.get("games"), list):
            entries = decoded["games"]
        elif "title" in decoded:
            entries = [decoded]
        else:
            entries = []
    elif isinstance(decoded, list):
        entries = decoded
    else:
        entries = []

    return [fields_from_mapping(entry) for entry in entries if isinstance(entry, dict)]
