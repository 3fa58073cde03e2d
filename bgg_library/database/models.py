import logging
import os
import sqlite3

logger = logging.getLogger(__name__)


def create_database(db_path="bgg_library.db"):
    """Create the database and the shared game catalog table."""

    # Ensure database directory exists (only if path contains directory)
    db_dir = os.path.dirname(str(db_path))
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    cursor = conn.cursor()

    # Categories are stored as a JSON array
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS games (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            publisher TEXT,
            year INTEGER,
            min_players INTEGER,
            max_players INTEGER,
            play_time_min INTEGER,
            play_time_max INTEGER,
            box_art_url TEXT,
            description TEXT,
            categories TEXT,
            bgg_rating REAL,
            bgg_rank INTEGER,
            suggested_age INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # Add enrichment columns to catalogs created before they existed
    columns_to_add = [
        ("description", "TEXT"),
        ("categories", "TEXT"),
        ("bgg_rating", "REAL"),
        ("bgg_rank", "INTEGER"),
        ("suggested_age", "INTEGER"),
    ]

    for column_name, column_def in columns_to_add:
        try:
            cursor.execute(f"ALTER TABLE games ADD COLUMN {column_name} {column_def}")
            logger.info(f"Added {column_name} column to existing database")
        except sqlite3.OperationalError:
            # Column already exists, ignore
            pass

    conn.commit()
    conn.close()
    logger.info(f"Database ready at {db_path}")
