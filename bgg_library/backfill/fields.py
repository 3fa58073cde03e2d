"""
Catalog fields that can be filled in by a backfill run.
"""

from dataclasses import dataclass
from typing import Dict

from ..config import AGE_LOOKUP_PROMPT, GAME_LOOKUP_PROMPT


@dataclass(frozen=True)
class BackfillField:
    """Where a field lives in storage and how to look it up."""
    name: str  # storage column
    attribute: str  # EnrichedFields attribute
    prompt_template: str
    label: str


BACKFILL_FIELDS: Dict[str, BackfillField] = {
    f.name: f for f in (
        BackfillField("suggested_age", "suggested_age", AGE_LOOKUP_PROMPT, "Suggested age"),
        BackfillField("bgg_rating", "bgg_rating", GAME_LOOKUP_PROMPT, "BGG rating"),
        BackfillField("bgg_rank", "bgg_rank", GAME_LOOKUP_PROMPT, "BGG rank"),
        BackfillField("description", "description", GAME_LOOKUP_PROMPT, "Description"),
        BackfillField("categories", "categories", GAME_LOOKUP_PROMPT, "Categories"),
    )
}


def get_backfill_field(name: str) -> BackfillField:
    try:
        return BACKFILL_FIELDS[name]
    except KeyError:
        choices = ", ".join(sorted(BACKFILL_FIELDS))
        raise ValueError(f"Unknown backfill field '{name}' (choose from: {choices})") from None
