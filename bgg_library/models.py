"""
Shared data models for the BGG Library package.
"""

from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional

from pydantic import BaseModel


class EnrichedFields(BaseModel):
    """Typed, validated game fields derived from one knowledge service response.

    Every attribute is independently optional; ``None`` means unknown.
    """
    title: Optional[str] = None
    publisher: Optional[str] = None
    year: Optional[int] = None
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    play_time_min: Optional[int] = None
    play_time_max: Optional[int] = None
    description: Optional[str] = None
    categories: Optional[List[str]] = None
    bgg_rating: Optional[float] = None
    bgg_rank: Optional[int] = None
    suggested_age: Optional[int] = None
    confidence: Literal["high", "medium", "low"] = "low"

    def is_empty(self) -> bool:
        """True when the service could not determine anything."""
        values = self.model_dump(exclude={"confidence"})
        return self.confidence == "low" and all(v is None for v in values.values())


@dataclass(frozen=True)
class EnrichmentRequest:
    """Input context for a single knowledge service call."""
    title: Optional[str] = None
    image: Optional[bytes] = field(default=None, repr=False)
    mime_type: str = "image/jpeg"


@dataclass
class CatalogGame:
    """A shared catalog record as stored in the database."""
    id: int
    title: str
    publisher: Optional[str] = None
    year: Optional[int] = None
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    play_time_min: Optional[int] = None
    play_time_max: Optional[int] = None
    box_art_url: Optional[str] = None
    description: Optional[str] = None
    categories: Optional[List[str]] = None
    bgg_rating: Optional[float] = None
    bgg_rank: Optional[int] = None
    suggested_age: Optional[int] = None


@dataclass(frozen=True)
class BackfillItem:
    """One record waiting for a missing field to be filled."""
    record_id: int
    title: str
    field: str


@dataclass
class BackfillOutcome:
    """Result of processing one backfill item."""
    record_id: int
    title: str
    success: bool
    value: Any = None
    error_message: Optional[str] = None
    attempts: int = 0

    @property
    def updated(self) -> bool:
        return self.success and self.value is not None

    @property
    def skipped(self) -> bool:
        return self.success and self.value is None


@dataclass
class BackfillSummary:
    """Aggregate result of one backfill run."""
    field: str
    total: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    results: List[BackfillOutcome] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, field_name: str, outcomes: List[BackfillOutcome]) -> "BackfillSummary":
        return cls(
            field=field_name,
            total=len(outcomes),
            updated=sum(1 for o in outcomes if o.updated),
            skipped=sum(1 for o in outcomes if o.skipped),
            failed=sum(1 for o in outcomes if not o.success),
            results=list(outcomes),
        )


@dataclass
class ImageAnalysisResult:
    """Result of identifying games from a box art photo."""
    success: bool
    games: List[EnrichedFields] = field(default_factory=list)
    game_count: int = 0
    error: Optional[str] = None
    raw_response: Optional[str] = None
