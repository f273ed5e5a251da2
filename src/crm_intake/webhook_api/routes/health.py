"""Health check routes."""

import logging

from fastapi import APIRouter

from ... import __version__
from ..services.ingestion import get_db_connection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "healthy", "service": "crm-intake", "version": __version__}


@router.get("/ready")
async def ready():
    """Readiness check - verifies the marketing tables are reachable."""
    conn = None
    try:
        conn = get_db_connection()
        conn.execute("SELECT 1 FROM marketing.inquiries LIMIT 1")
        return {"status": "ready"}
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        return {"status": "not_ready", "detail": str(e)}
    finally:
        if conn:
            conn.close()
