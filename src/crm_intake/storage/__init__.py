"""Storage layer for the marketing inquiry tables."""

from .database import get_connection, utc_timestamp
from .migrations import run_migrations
from .models import INQUIRY_STATUSES, InquiryStatus

__all__ = [
    "get_connection",
    "utc_timestamp",
    "run_migrations",
    "INQUIRY_STATUSES",
    "InquiryStatus",
]
