"""
Backfill orchestrator using LangGraph to coordinate each record's lookup.

Records are processed strictly one at a time: call the knowledge service,
parse the response, persist the value. Transient service failures are retried
a bounded number of times; every other per-record failure is captured in the
run summary so one bad record never stops the run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, TypedDict, Union

from langgraph.graph import StateGraph, END

from ..config import DATABASE_PATH, RATE_LIMIT_DELAY, MAX_RETRIES
from ..enrichment.client import EnrichmentClient
from ..enrichment.parser import parse_enriched_fields
from ..error_handling import TransientCallError
from ..models import (
    BackfillItem,
    BackfillOutcome,
    BackfillSummary,
    EnrichedFields,
    EnrichmentRequest,
)
from .fields import BackfillField, get_backfill_field
from .storage import RecordSink, RecordSource

logger = logging.getLogger(__name__)


@dataclass
class BackfillConfig:
    """Pacing and retry settings for a run.

    Attributes:
        rate_limit_delay: Seconds to wait between service calls, both between
            records and before a retry.
        max_retries: Additional attempts after a transient call failure.
        limit: Process at most this many records.
    """
    rate_limit_delay: float = RATE_LIMIT_DELAY
    max_retries: int = MAX_RETRIES
    limit: Optional[int] = None


class ItemState(TypedDict, total=False):
    item: BackfillItem
    attempts: int
    raw_text: Optional[str]
    error: Optional[str]
    transient: bool
    value: Any
    outcome: Optional[BackfillOutcome]


class BackfillOrchestrator:
    """Fills one missing catalog field across every record lacking it."""

    def __init__(self,
                 field: Union[str, BackfillField],
                 client: Optional[EnrichmentClient] = None,
                 source: Optional[RecordSource] = None,
                 sink: Optional[RecordSink] = None,
                 config: Optional[BackfillConfig] = None,
                 parser: Callable[[str], EnrichedFields] = parse_enriched_fields,
                 sleep: Callable[[float], None] = time.sleep):
        self.field = field if isinstance(field, BackfillField) else get_backfill_field(field)
        self.config = config or BackfillConfig()
        self.client = client or EnrichmentClient(prompt_template=self.field.prompt_template)
        if source is None or sink is None:
            from ..database import CatalogDatabase
            db = CatalogDatabase(DATABASE_PATH)
            source = source or db
            sink = sink or db
        self.source = source
        self.sink = sink
        self.parser = parser
        self.sleep = sleep
        self.graph = self._build_graph()

    def _build_graph(self):
        graph = StateGraph(ItemState)

        def call_service(state: ItemState) -> ItemState:
            item = state["item"]
            attempts = state.get("attempts", 0) + 1
            try:
                raw = self.client.call(EnrichmentRequest(title=item.title))
            except TransientCallError as e:
                return {"attempts": attempts, "error": str(e), "transient": True}
            except Exception as e:
                logger.exception(f"Unexpected error looking up '{item.title}'")
                return {"attempts": attempts, "error": str(e) or type(e).__name__, "transient": False}
            return {"attempts": attempts, "raw_text": raw, "error": None}

        def route_after_call(state: ItemState) -> str:
            if state.get("error") is None:
                return "parse"
            if state.get("transient") and state["attempts"] <= self.config.max_retries:
                return "wait_before_retry"
            return "record_failure"

        def wait_before_retry(state: ItemState) -> ItemState:
            remaining = self.config.max_retries - state["attempts"] + 1
            logger.info(f"  Retrying {state['item'].title} ({remaining} attempts left)...")
            self._wait()
            return {}

        def parse(state: ItemState) -> ItemState:
            try:
                fields = self.parser(state["raw_text"])
                value = getattr(fields, self.field.attribute)
            except Exception as e:
                logger.exception(f"Failed to parse response for '{state['item'].title}'")
                return {"error": f"Failed to parse response: {str(e) or type(e).__name__}"}
            return {"value": value}

        def route_after_parse(state: ItemState) -> str:
            if state.get("error") is not None:
                return "record_failure"
            return "record_skip" if state.get("value") is None else "persist"

        def persist(state: ItemState) -> ItemState:
            item = state["item"]
            value = state["value"]
            try:
                if not self.sink.set_field(item.record_id, self.field.name, value):
                    raise RuntimeError(f"Record {item.record_id} was not updated")
            except Exception as e:
                logger.error(f"Failed to save {self.field.name} for '{item.title}': {e}")
                return {"outcome": self._outcome(state, success=False, error_message=str(e))}
            return {"outcome": self._outcome(state, success=True, value=value)}

        def record_skip(state: ItemState) -> ItemState:
            message = f"{self.field.label} could not be determined"
            return {"outcome": self._outcome(state, success=True, error_message=message)}

        def record_failure(state: ItemState) -> ItemState:
            return {"outcome": self._outcome(state, success=False, error_message=state.get("error"))}

        graph.add_node("call_service", call_service)
        graph.add_node("wait_before_retry", wait_before_retry)
        graph.add_node("parse", parse)
        graph.add_node("persist", persist)
        graph.add_node("record_skip", record_skip)
        graph.add_node("record_failure", record_failure)

        graph.add_conditional_edges("call_service", route_after_call, {
            "parse": "parse",
            "wait_before_retry": "wait_before_retry",
            "record_failure": "record_failure",
        })
        graph.add_edge("wait_before_retry", "call_service")
        graph.add_conditional_edges("parse", route_after_parse, {
            "persist": "persist",
            "record_skip": "record_skip",
            "record_failure": "record_failure",
        })
        graph.add_edge("persist", END)
        graph.add_edge("record_skip", END)
        graph.add_edge("record_failure", END)

        graph.set_entry_point("call_service")
        return graph.compile()

    def _outcome(self, state: ItemState, success: bool, value: Any = None,
                 error_message: Optional[str] = None) -> BackfillOutcome:
        item = state["item"]
        return BackfillOutcome(
            record_id=item.record_id,
            title=item.title,
            success=success,
            value=value,
            error_message=error_message,
            attempts=state.get("attempts", 0),
        )

    def _wait(self) -> None:
        self.sleep(self.config.rate_limit_delay)

    def process_item(self, item: BackfillItem) -> BackfillOutcome:
        """Resolve one record completely: lookup, parse, persist."""
        state: ItemState = {
            "item": item,
            "attempts": 0,
            "raw_text": None,
            "error": None,
            "transient": False,
            "value": None,
            "outcome": None,
        }
        # Each attempt visits at most two nodes, plus parse and a terminal node
        recursion_limit = 2 * (self.config.max_retries + 1) + 5
        final: ItemState = self.graph.invoke(state, config={"recursion_limit": recursion_limit})
        return final["outcome"]

    def list_items(self) -> List[BackfillItem]:
        """Read the work list once; storage errors propagate."""
        items = list(self.source.list_missing(self.field.name))
        if self.config.limit is not None:
            items = items[:self.config.limit]
        return items

    def run(self) -> BackfillSummary:
        """
        Run the backfill over every record currently missing the field.

        Re-running is safe: records filled by an earlier run are no longer
        listed by the source.

        Returns:
            Summary of the run with one outcome per listed record
        """
        logger.info(f"Starting {self.field.name} backfill...")
        items = self.list_items()

        if not items:
            logger.info(f"No games found with missing {self.field.name}. Nothing to backfill.")
            return BackfillSummary.from_outcomes(self.field.name, [])

        logger.info(f"Found {len(items)} games with missing {self.field.name}.")

        outcomes: List[BackfillOutcome] = []
        for i, item in enumerate(items):
            logger.info(f"[{i + 1}/{len(items)}] Processing: {item.title}")
            outcome = self.process_item(item)
            outcomes.append(outcome)
            self._log_outcome(outcome)

            # Rate limiting between records, not after the last one
            if i < len(items) - 1:
                self._wait()

        summary = BackfillSummary.from_outcomes(self.field.name, outcomes)
        self._log_summary(summary)
        return summary

    def _log_outcome(self, outcome: BackfillOutcome) -> None:
        if outcome.updated:
            logger.info(f"  ✓ Updated: {self.field.label} = {outcome.value}")
        elif outcome.skipped:
            logger.info(f"  - Skipped: {outcome.error_message}")
        else:
            logger.warning(f"  ✗ Failed: {outcome.error_message}")

    def _log_summary(self, summary: BackfillSummary) -> None:
        logger.info("========== Backfill Summary ==========")
        logger.info(f"Total games processed: {summary.total}")
        logger.info(f"Successfully updated:  {summary.updated}")
        logger.info(f"Skipped (unknown):     {summary.skipped}")
        logger.info(f"Failed:                {summary.failed}")
        logger.info("======================================")
