"""
Backfill module for filling missing catalog fields in bulk.

This package handles:
- The registry of backfillable fields
- Storage interfaces for listing and updating records
- The rate-limited, retrying orchestrator (LangGraph)
"""

from .fields import BackfillField, BACKFILL_FIELDS, get_backfill_field
from .storage import RecordSource, RecordSink
from .orchestrator import BackfillOrchestrator, BackfillConfig

__all__ = [
    "BackfillField",
    "BACKFILL_FIELDS",
    "get_backfill_field",
    "RecordSource",
    "RecordSink",
    "BackfillOrchestrator",
    "BackfillConfig",
]
