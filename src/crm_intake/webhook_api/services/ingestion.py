"""Webhook ingestion: dedupe lookup and insert-or-fold into the inquiry tables."""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from ...storage import get_connection, utc_timestamp
from ...storage.database import MARKETING_SCHEMA
from ..config import settings

logger = logging.getLogger(__name__)

DEFAULT_DEDUPE_WINDOW = timedelta(minutes=10)


def get_db_connection() -> sqlite3.Connection:
    """Get a connection with the marketing namespace attached."""
    return get_connection(settings.db_path, settings.marketing_db_path)


@dataclass(frozen=True)
class IngestionTarget:
    """One inquiry table and how a webhook payload maps onto it."""

    table: str
    # payload field -> column; ``date`` is handled separately
    columns: Dict[str, str]
    dedupe_fields: Tuple[str, ...]
    # stored as NULL rather than '' when empty
    nullable_fields: FrozenSet[str]
    saved_message: str

    @property
    def qualified_table(self) -> str:
        return f"{MARKETING_SCHEMA}.{self.table}"


INQUIRY_TARGET = IngestionTarget(
    table="inquiries",
    columns={
        "name": "customer_name",
        "phone": "phone",
        "product": "product_name",
        "utm_campaign": "utm_campaign",
        "source_url": "source_url",
        "birthday": "birthday",
        "sex": "sex",
        "request": "request",
    },
    dedupe_fields=("phone", "utm_campaign"),
    nullable_fields=frozenset({"birthday", "sex", "request"}),
    saved_message="Inquiry saved successfully",
)

RECRUIT_TARGET = IngestionTarget(
    table="recruit_inquiries",
    columns={
        "name": "customer_name",
        "phone": "phone",
        "age": "age",
        "area": "area",
        "career": "career",
        "request": "request",
        "referer_page": "referer_page",
        "utm_campaign": "utm_campaign",
        "source_url": "source_url",
    },
    dedupe_fields=("phone",),
    nullable_fields=frozenset({
        "age", "area", "career", "request", "referer_page", "utm_campaign", "source_url",
    }),
    saved_message="Recruit inquiry saved successfully",
)


class IngestOutcome(Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    IGNORED = "ignored"


@dataclass
class IngestResult:
    record_id: int
    outcome: IngestOutcome
    message: str

    @property
    def duplicate(self) -> bool:
        return self.outcome is not IngestOutcome.INSERTED

    def to_response(self) -> Dict[str, Any]:
        response = {"success": True, "message": self.message, "id": self.record_id}
        if self.duplicate:
            response["duplicate"] = True
        return response


def find_recent_match(
    conn: sqlite3.Connection,
    target: IngestionTarget,
    fields: Dict[str, Any],
    since: str,
) -> Optional[sqlite3.Row]:
    """Newest record sharing the dedupe key created at or after ``since``."""
    where = " AND ".join(f"{target.columns[f]} = ?" for f in target.dedupe_fields)
    params = [fields.get(f) or "" for f in target.dedupe_fields]
    cursor = conn.execute(
        f"""SELECT id, request FROM {target.qualified_table}
            WHERE {where} AND created_at >= ?
            ORDER BY created_at DESC, id DESC
            LIMIT 1""",
        (*params, since),
    )
    return cursor.fetchone()


def _insert(
    conn: sqlite3.Connection,
    target: IngestionTarget,
    fields: Dict[str, Any],
    now: datetime,
) -> int:
    row: Dict[str, Any] = {}
    for field, column in target.columns.items():
        value = fields.get(field) or ""
        if not value and field in target.nullable_fields:
            value = None
        row[column] = value
    # Default to the calendar date where the service runs
    row["inquiry_date"] = fields.get("date") or now.astimezone().date().isoformat()
    stamp = utc_timestamp(now)
    row["created_at"] = stamp
    row["updated_at"] = stamp

    columns = ", ".join(row)
    placeholders = ", ".join("?" for _ in row)
    cursor = conn.execute(
        f"INSERT INTO {target.qualified_table} ({columns}) VALUES ({placeholders})",
        tuple(row.values()),
    )
    return cursor.lastrowid


def ingest(
    conn: sqlite3.Connection,
    target: IngestionTarget,
    fields: Dict[str, Any],
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_DEDUPE_WINDOW,
) -> IngestResult:
    """Store a sanitized submission, folding resubmissions into the recent record.

    Within ``window`` of an existing record with the same dedupe key, a
    submission carrying a non-empty ``request`` replaces that record's
    ``request``; one without is dropped. Otherwise a new record is inserted.

    The lookup and the write share one ``BEGIN IMMEDIATE`` transaction, so
    concurrent submissions for a key are serialized by the database write
    lock. Errors roll back and propagate without retry.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    since = utc_timestamp(now - window)

    conn.execute("BEGIN IMMEDIATE")
    try:
        existing = find_recent_match(conn, target, fields, since)
        if existing is None:
            record_id = _insert(conn, target, fields, now)
            result = IngestResult(record_id, IngestOutcome.INSERTED, target.saved_message)
        elif (fields.get("request") or "").strip():
            conn.execute(
                f"UPDATE {target.qualified_table} SET request = ?, updated_at = ? WHERE id = ?",
                (fields["request"], utc_timestamp(now), existing["id"]),
            )
            result = IngestResult(existing["id"], IngestOutcome.UPDATED, "Duplicate updated with request")
        else:
            result = IngestResult(existing["id"], IngestOutcome.IGNORED, "Duplicate ignored")
        conn.execute("COMMIT")
    except Exception:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise

    if result.outcome is IngestOutcome.UPDATED:
        logger.info(f"Duplicate {target.table} submission updated with new request: {result.record_id}")
    elif result.outcome is IngestOutcome.IGNORED:
        logger.info(f"Duplicate {target.table} submission ignored: {result.record_id}")
    return result
