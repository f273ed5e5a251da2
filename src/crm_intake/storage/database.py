"""SQLite connections for the main database and the marketing namespace."""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

MARKETING_SCHEMA = "marketing"

PathLike = Union[str, Path]


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Format a moment as a fixed-width UTC ISO-8601 string.

    Fixed width keeps lexicographic order equal to chronological order,
    which the dedupe lookback relies on.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="microseconds")


def get_connection(
    db_path: PathLike,
    marketing_db_path: Optional[PathLike] = None,
) -> sqlite3.Connection:
    """Open the main database with the marketing file attached.

    The connection runs in autocommit mode; callers that need atomic
    read-then-write sequences open their own ``BEGIN IMMEDIATE`` block.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    if marketing_db_path is None:
        marketing_db_path = db_path.parent / "marketing.db"
    marketing_db_path = Path(marketing_db_path)
    marketing_db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), isolation_level=None, timeout=10)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(
        f"ATTACH DATABASE ? AS {MARKETING_SCHEMA}", (str(marketing_db_path),)
    )
    conn.execute(f"PRAGMA {MARKETING_SCHEMA}.journal_mode=WAL")
    return conn
