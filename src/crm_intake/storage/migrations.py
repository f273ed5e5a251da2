"""Simple migration system for the marketing schema."""

import logging
import sqlite3
from pathlib import Path

from .database import MARKETING_SCHEMA

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def get_applied_migrations(conn: sqlite3.Connection) -> set:
    """Get the set of already-applied migration versions."""
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS {MARKETING_SCHEMA}.schema_migrations (
            version TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    cursor = conn.execute(f"SELECT version FROM {MARKETING_SCHEMA}.schema_migrations")
    return {row[0] for row in cursor.fetchall()}


def _statements(sql: str):
    # Strip comment-only lines, then split on semicolons
    lines = [
        line for line in sql.splitlines()
        if line.strip() and not line.strip().startswith("--")
    ]
    for statement in "\n".join(lines).split(";"):
        statement = statement.strip()
        if statement:
            yield statement


def run_migrations(conn: sqlite3.Connection) -> int:
    """Apply all pending migrations on an open connection.

    Each migration file runs in its own transaction. Returns the number of
    migrations applied.
    """
    applied = get_applied_migrations(conn)

    applied_count = 0
    for migration_file in sorted(MIGRATIONS_DIR.glob("*.sql")):
        version = migration_file.stem
        if version in applied:
            continue
        logger.info(f"Applying migration: {version}")
        conn.execute("BEGIN")
        try:
            for statement in _statements(migration_file.read_text(encoding="utf-8")):
                conn.execute(statement)
            conn.execute(
                f"INSERT INTO {MARKETING_SCHEMA}.schema_migrations (version) VALUES (?)",
                (version,),
            )
            conn.execute("COMMIT")
        except sqlite3.Error:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        applied_count += 1

    return applied_count
