"""
Command-line interface for the BGG Library package.

This module provides CLI commands for:
- Backfilling missing catalog fields
- Identifying games from box art photos
- Catalog coverage statistics
"""

from .main import main

__all__ = [
    "main",
]
