"""
Database operations for the shared game catalog.

This module provides the storage side of the enrichment pipeline: listing
games that still miss a field, writing a single enriched value back, and
adding games identified from box art.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, List, Optional

from ..backfill.fields import BACKFILL_FIELDS
from ..backfill.storage import RecordSink, RecordSource
from ..error_handling import StorageError, handle_errors
from ..models import BackfillItem, CatalogGame, EnrichedFields
from .models import create_database

logger = logging.getLogger(__name__)

# Columns a caller may read or write by name
GAME_COLUMNS = (
    "title", "publisher", "year", "min_players", "max_players",
    "play_time_min", "play_time_max", "box_art_url", "description",
    "categories", "bgg_rating", "bgg_rank", "suggested_age",
)
JSON_COLUMNS = {"categories"}


def _check_column(field: str) -> None:
    if field not in GAME_COLUMNS:
        raise ValueError(f"Unknown catalog field: {field}")


class CatalogDatabase(RecordSource, RecordSink):
    """
    High-level operations on the catalog database.
    """

    def __init__(self, db_path: Path):
        """
        Initialize the catalog database handler.

        Args:
            db_path: Path to the catalog database
        """
        self.db_path = Path(db_path)

        # Create database if it doesn't exist
        if not self.db_path.exists():
            logger.info(f"Database not found at {self.db_path}, creating it...")
            create_database(str(self.db_path))

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def list_missing(self, field: str) -> List[BackfillItem]:
        """
        Get games whose ``field`` is still unset, ordered by title.

        Args:
            field: Catalog column to check

        Returns:
            Work items for a backfill run

        Raises:
            StorageError: The catalog could not be read
        """
        _check_column(field)
        conn = self._connect()
        try:
            rows = conn.execute(
                f"SELECT id, title FROM games WHERE {field} IS NULL "
                "ORDER BY title COLLATE NOCASE ASC, id ASC"
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to fetch games: {e}") from e
        finally:
            conn.close()

        logger.info(f"Retrieved {len(rows)} games missing {field}")
        return [BackfillItem(record_id=row["id"], title=row["title"], field=field) for row in rows]

    def set_field(self, record_id: int, field: str, value: Any) -> bool:
        """
        Write one field of one game. Writing the same value twice is harmless.

        Args:
            record_id: Game id
            field: Catalog column to update
            value: Normalized value; lists are stored as JSON

        Returns:
            True if a game was updated

        Raises:
            StorageError: The update failed
        """
        _check_column(field)
        if field in JSON_COLUMNS and value is not None:
            value = json.dumps(value)

        conn = self._connect()
        try:
            cursor = conn.execute(
                f"UPDATE games SET {field} = ?, updated_at = datetime('now') WHERE id = ?",
                (value, record_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Failed to update game {record_id}: {e}") from e
        finally:
            conn.close()

    def find_game_by_title(self, title: str) -> Optional[CatalogGame]:
        """Case-insensitive exact title lookup."""
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM games WHERE title = ? COLLATE NOCASE ORDER BY id LIMIT 1",
                (title.strip(),),
            ).fetchone()
        finally:
            conn.close()
        return self._row_to_game(row) if row else None

    def get_game(self, record_id: int) -> Optional[CatalogGame]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM games WHERE id = ?", (record_id,)).fetchone()
        finally:
            conn.close()
        return self._row_to_game(row) if row else None

    def add_game(self, fields: EnrichedFields, box_art_url: Optional[str] = None) -> int:
        """
        Add a game to the shared catalog unless one with the same title exists.

        Args:
            fields: Enriched fields; ``title`` is required
            box_art_url: Optional link to the box art

        Returns:
            Id of the new or existing game
        """
        if not fields.title:
            raise ValueError("Cannot add a game without a title")

        existing = self.find_game_by_title(fields.title)
        if existing:
            logger.info(f"Game '{fields.title}' already in catalog (id {existing.id})")
            return existing.id

        values = {
            "title": fields.title,
            "publisher": fields.publisher,
            "year": fields.year,
            "min_players": fields.min_players,
            "max_players": fields.max_players,
            "play_time_min": fields.play_time_min,
            "play_time_max": fields.play_time_max,
            "box_art_url": box_art_url,
            "description": fields.description,
            "categories": json.dumps(fields.categories) if fields.categories is not None else None,
            "bgg_rating": fields.bgg_rating,
            "bgg_rank": fields.bgg_rank,
            "suggested_age": fields.suggested_age,
        }
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)

        conn = self._connect()
        try:
            cursor = conn.execute(
                f"INSERT INTO games ({columns}) VALUES ({placeholders})",
                tuple(values.values()),
            )
            conn.commit()
            logger.info(f"Inserting new game: {fields.title}")
            return cursor.lastrowid
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Failed to add game '{fields.title}': {e}") from e
        finally:
            conn.close()

    @handle_errors(default_return={})
    def get_statistics(self) -> dict:
        """
        Get catalog size and how many games still miss each enrichable field.

        Returns:
            Dictionary with statistics, empty on error
        """
        conn = self._connect()
        try:
            total_games = conn.execute("SELECT COUNT(*) FROM games").fetchone()[0]
            missing = {
                name: conn.execute(f"SELECT COUNT(*) FROM games WHERE {name} IS NULL").fetchone()[0]
                for name in BACKFILL_FIELDS
            }
        finally:
            conn.close()

        return {
            'total_games_in_db': total_games,
            'missing': missing,
        }

    def _row_to_game(self, row: sqlite3.Row) -> CatalogGame:
        categories = json.loads(row["categories"]) if row["categories"] else None
        return CatalogGame(
            id=row["id"],
            title=row["title"],
            publisher=row["publisher"],
            year=row["year"],
            min_players=row["min_players"],
            max_players=row["max_players"],
            play_time_min=row["play_time_min"],
            play_time_max=row["play_time_max"],
            box_art_url=row["box_art_url"],
            description=row["description"],
            categories=categories,
            bgg_rating=row["bgg_rating"],
            bgg_rank=row["bgg_rank"],
            suggested_age=row["suggested_age"],
        )
