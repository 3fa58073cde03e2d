"""
Database module for the shared game catalog.

This module handles:
- Database schema creation
- Listing games that miss an enrichable field
- Writing enriched values and new catalog entries
"""

from .operations import CatalogDatabase
from .models import create_database
from ..models import CatalogGame

__all__ = [
    "CatalogGame",
    "CatalogDatabase",
    "create_database",
]
