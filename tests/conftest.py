"""Shared fakes for the enrichment and backfill tests."""

from typing import Any, Dict, List

import pytest

from bgg_library.backfill import RecordSink, RecordSource
from bgg_library.error_handling import StorageError, TransientCallError
from bgg_library.models import BackfillItem, EnrichmentRequest


class FakeClient:
    """Replays scripted responses per title; exceptions in a script are raised."""

    def __init__(self, scripts: Dict[str, List[Any]] = None, default: str = '{"confidence": "low"}'):
        self.scripts = {title: list(steps) for title, steps in (scripts or {}).items()}
        self.default = default
        self.calls: List[str] = []

    def call(self, request: EnrichmentRequest) -> str:
        self.calls.append(request.title)
        steps = self.scripts.get(request.title)
        step = steps.pop(0) if steps else self.default
        if isinstance(step, Exception):
            raise step
        return step


class MemoryStore(RecordSource, RecordSink):
    """In-memory catalog keyed by id, holding one value per field."""

    def __init__(self, titles: List[str], field: str = "suggested_age"):
        self.rows = {i + 1: {"title": title, field: None} for i, title in enumerate(titles)}
        self.writes: List[tuple] = []
        self.fail_writes_for: set = set()
        self.fail_listing = False

    def list_missing(self, field: str) -> List[BackfillItem]:
        if self.fail_listing:
            raise StorageError("Failed to fetch games: connection refused")
        missing = [(row["title"], record_id) for record_id, row in self.rows.items()
                   if row.get(field) is None]
        return [BackfillItem(record_id=record_id, title=title, field=field)
                for title, record_id in sorted(missing)]

    def set_field(self, record_id: int, field: str, value: Any) -> bool:
        if record_id in self.fail_writes_for:
            raise StorageError(f"Failed to update game {record_id}: disk full")
        self.writes.append((record_id, field, value))
        self.rows[record_id][field] = value
        return True


class SleepRecorder:
    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def transient(message: str = "503 Service Unavailable") -> TransientCallError:
    return TransientCallError(message)


@pytest.fixture
def sleep():
    return SleepRecorder()
