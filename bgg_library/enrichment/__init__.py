"""
Enrichment module for deriving game metadata from an AI knowledge service.

This package handles:
- Value normalization rules
- Response parsing (single and multi-game)
- The Together.ai client
- Box art analysis
"""

from .client import EnrichmentClient, render_prompt
from .parser import parse_enriched_fields, parse_games, clean_response_text
from .analyzer import analyze_game_image

__all__ = [
    "EnrichmentClient",
    "render_prompt",
    "parse_enriched_fields",
    "parse_games",
    "clean_response_text",
    "analyze_game_image",
]
