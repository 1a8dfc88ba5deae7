"""
SQLite storage for the last successfully loaded feed.
"""

import json
import sqlite3
from datetime import datetime, timezone

from core.config import DB_PATH
from models.events import DateRange

CREATE_FEED_CACHE_SQL = """
    CREATE TABLE IF NOT EXISTS feed_cache (
        source_url TEXT PRIMARY KEY,
        ranges_json TEXT NOT NULL,
        timestamp TEXT NOT NULL
    )
"""


def get_connection() -> sqlite3.Connection:
    """Get a database connection, creating the cache table if needed."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.execute(CREATE_FEED_CACHE_SQL)
    return conn


def save_cached_ranges(
    conn: sqlite3.Connection, source_url: str, ranges: list[DateRange]
) -> str:
    """
    Store the ranges loaded from a feed, replacing any previous copy.

    Returns:
        ISO 8601 UTC timestamp of the cache entry
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    payload = json.dumps([r.to_dict() for r in ranges])

    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO feed_cache (source_url, ranges_json, timestamp)
        VALUES (?, ?, ?)
        ON CONFLICT(source_url) DO UPDATE SET
            ranges_json = excluded.ranges_json,
            timestamp = excluded.timestamp
        """,
        (source_url, payload, timestamp),
    )
    conn.commit()
    return timestamp


def load_cached_ranges(
    conn: sqlite3.Connection, source_url: str
) -> tuple[list[DateRange], str] | None:
    """Return (ranges, timestamp) cached for a feed, or None if never cached."""
    cursor = conn.cursor()
    cursor.execute(
        "SELECT ranges_json, timestamp FROM feed_cache WHERE source_url = ?",
        (source_url,),
    )
    row = cursor.fetchone()
    if row is None:
        return None

    ranges_json, timestamp = row
    ranges = [DateRange.from_dict(item) for item in json.loads(ranges_json)]
    return ranges, timestamp
