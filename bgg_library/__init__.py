"""
BGG Library Package - board game catalog enrichment.

This package provides two main functionalities:
1. Backfilling missing catalog fields from an AI knowledge service
2. Identifying games from box art photos to populate the catalog
"""

__version__ = "0.1.0"
__author__ = "BGG Library Team"

# Main package imports for convenience
from .database import CatalogDatabase
from .backfill import BackfillOrchestrator, BackfillConfig
from .enrichment import EnrichmentClient, parse_enriched_fields, analyze_game_image
from .models import EnrichedFields, BackfillSummary, BackfillOutcome
from .logging_config import setup_logging

__all__ = [
    "CatalogDatabase",
    "BackfillOrchestrator",
    "BackfillConfig",
    "EnrichmentClient",
    "parse_enriched_fields",
    "analyze_game_image",
    "EnrichedFields",
    "BackfillSummary",
    "BackfillOutcome",
    "setup_logging",
]
