"""Inquiry desk service: listing, entering and updating stored inquiries."""

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

from ...storage import utc_timestamp
from ...storage.database import MARKETING_SCHEMA
from ...storage.models import (
    INQUIRY_STATUSES,
    InquiryRecord,
    InquiryStatus,
    RecruitInquiryRecord,
)
from .ingestion import get_db_connection

SEARCH_STRIP_RE = re.compile(r"""[(),."'\\;]""")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Desk columns a staff member may change
UPDATABLE_COLUMNS = ("status", "manager_id", "memo", "email", "admin_comment")


class InquiryNotFound(LookupError):
    pass


def sanitize_search(raw: Optional[str]) -> str:
    """Drop punctuation that has no place in a name or phone search."""
    return SEARCH_STRIP_RE.sub("", raw or "").strip()


def parse_pagination(page: Optional[int], limit: Optional[int]):
    """Clamp page and page size; returns (page, limit, offset)."""
    if not page or page < 1:
        page = 1
    if not limit or limit < 1:
        limit = DEFAULT_PAGE_SIZE
    limit = min(limit, MAX_PAGE_SIZE)
    return page, limit, (page - 1) * limit


class InquiryDeskService:
    """Read/write operations over one marketing inquiry table."""

    def __init__(self, table: str, record_cls: Type, conn_factory=get_db_connection):
        self.table = f"{MARKETING_SCHEMA}.{table}"
        self.record_cls = record_cls
        self._conn_factory = conn_factory

    def list_inquiries(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        manager_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        page, limit, offset = parse_pagination(page, limit)
        search = sanitize_search(search)

        wheres = []
        params: list = []
        if search:
            wheres.append("(customer_name LIKE ? OR phone LIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])
        if status:
            # "!closed" means everything except closed
            if status.startswith("!"):
                wheres.append("COALESCE(status, 'new') != ?")
                params.append(status[1:])
            else:
                wheres.append("COALESCE(status, 'new') = ?")
                params.append(status)
        if manager_id:
            wheres.append("manager_id = ?")
            params.append(manager_id)
        where_sql = f" WHERE {' AND '.join(wheres)}" if wheres else ""

        conn = self._conn_factory()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) FROM {self.table}{where_sql}", params
            ).fetchone()[0]
            cursor = conn.execute(
                f"SELECT * FROM {self.table}{where_sql} "
                "ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            )
            data = [self.record_cls.from_row(row).to_dict() for row in cursor.fetchall()]
        finally:
            conn.close()

        return {
            "data": data,
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit),
        }

    def create_inquiry(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a hand-entered inquiry; raises ValueError on an unknown status."""
        status = data.get("status") or InquiryStatus.NEW.value
        if status not in INQUIRY_STATUSES:
            raise ValueError(f"Invalid status: {status}")

        now = datetime.now(timezone.utc)
        stamp = utc_timestamp(now)
        row = {
            "customer_name": data.get("customer_name") or "",
            "phone": data.get("phone") or "",
            "product_name": data.get("product_name") or "",
            "status": status,
            "manager_id": data.get("manager_id") or None,
            "memo": data.get("memo") or None,
            "inquiry_date": now.astimezone().date().isoformat(),
            "created_at": stamp,
            "updated_at": stamp,
        }
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)

        conn = self._conn_factory()
        try:
            cursor = conn.execute(
                f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
                tuple(row.values()),
            )
            created = conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
            return self.record_cls.from_row(created).to_dict()
        finally:
            conn.close()

    def update_inquiry(self, inquiry_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply desk field changes; raises ValueError on an unknown status."""
        if "status" in changes and changes["status"] not in INQUIRY_STATUSES:
            raise ValueError(f"Invalid status: {changes['status']}")

        updates = {k: v for k, v in changes.items() if k in UPDATABLE_COLUMNS}
        updates["updated_at"] = utc_timestamp()
        assignments = ", ".join(f"{column} = ?" for column in updates)

        conn = self._conn_factory()
        try:
            cursor = conn.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                [*updates.values(), inquiry_id],
            )
            if cursor.rowcount == 0:
                raise InquiryNotFound(f"Inquiry {inquiry_id} not found")
            row = conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (inquiry_id,)
            ).fetchone()
            return self.record_cls.from_row(row).to_dict()
        finally:
            conn.close()


def inquiry_desk() -> InquiryDeskService:
    return InquiryDeskService("inquiries", InquiryRecord)


def recruit_desk() -> InquiryDeskService:
    return InquiryDeskService("recruit_inquiries", RecruitInquiryRecord)
