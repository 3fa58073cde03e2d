"""
Storage interfaces the backfill orchestrator depends on.
"""

from abc import ABC, abstractmethod
from typing import Any, List

from ..models import BackfillItem


class RecordSource(ABC):
    """Supplies the records still missing a field."""

    @abstractmethod
    def list_missing(self, field: str) -> List[BackfillItem]:
        """
        Return every record whose ``field`` is unset, in a stable order.

        Raises on storage failure; a backfill run cannot start without it.
        """


class RecordSink(ABC):
    """Persists a single normalized value."""

    @abstractmethod
    def set_field(self, record_id: int, field: str, value: Any) -> bool:
        """
        Write ``value`` into ``field`` of one record. Idempotent.

        Returns:
            True if the record was updated
        """
