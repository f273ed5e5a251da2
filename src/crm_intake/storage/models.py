"""Data models for the marketing inquiry tables."""

import sqlite3
from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Dict, Any


class InquiryStatus(Enum):
    """Consultation status of an inquiry on the staff desk."""

    NEW = "new"
    CONTACTED = "contacted"
    CONSULTING = "consulting"
    CLOSED = "closed"
    CALLED = "called"
    TEXTED = "texted"
    NO_ANSWER = "no_answer"
    REJECTED = "rejected"
    WRONG_NUMBER = "wrong_number"
    INELIGIBLE = "ineligible"
    UPSELL = "upsell"


INQUIRY_STATUSES = [s.value for s in InquiryStatus]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class _Record:
    """Row mapping shared by both inquiry tables."""

    @classmethod
    def from_row(cls, row: sqlite3.Row):
        keys = set(row.keys())
        return cls(**{f.name: row[f.name] for f in fields(cls) if f.name in keys})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys for the desk API."""
        data = {_camel(f.name): getattr(self, f.name) for f in fields(self)}
        data["status"] = data["status"] or InquiryStatus.NEW.value
        return data


@dataclass
class InquiryRecord(_Record):
    """A product inquiry submitted through the website form."""

    id: int
    customer_name: str = ""
    phone: str = ""
    product_name: str = ""
    utm_campaign: str = ""
    source_url: str = ""
    inquiry_date: Optional[str] = None
    birthday: Optional[str] = None
    sex: Optional[str] = None
    request: Optional[str] = None

    # Desk fields
    status: Optional[str] = InquiryStatus.NEW.value
    manager_id: Optional[str] = None
    email: Optional[str] = None
    memo: Optional[str] = None
    admin_comment: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class RecruitInquiryRecord(_Record):
    """A job application inquiry submitted through the recruiting form."""

    id: int
    customer_name: str = ""
    phone: str = ""
    age: Optional[str] = None
    area: Optional[str] = None
    career: Optional[str] = None
    request: Optional[str] = None
    referer_page: Optional[str] = None
    utm_campaign: Optional[str] = None
    source_url: Optional[str] = None
    inquiry_date: Optional[str] = None

    status: Optional[str] = InquiryStatus.NEW.value
    manager_id: Optional[str] = None
    email: Optional[str] = None
    memo: Optional[str] = None
    admin_comment: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
