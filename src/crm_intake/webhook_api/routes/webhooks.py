"""Inbound inquiry webhooks posted by the marketing site's forms."""

import logging
from datetime import timedelta
from typing import Optional, Type

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import settings
from ..middleware.auth import verify_bearer
from ..middleware.rate_limit import FixedWindowRateLimiter, client_address
from ..schemas.inquiry import ErrorResponse, InquiryPayload, RecruitPayload, WebhookResponse
from ..services.ingestion import (
    INQUIRY_TARGET,
    RECRUIT_TARGET,
    IngestionTarget,
    get_db_connection,
    ingest,
)
from ..services.validation import (
    PayloadValidationError,
    mask_pii,
    sanitize_fields,
    validate_payload,
)

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, details: Optional[dict] = None) -> JSONResponse:
    body = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def build_webhook_router(
    prefix: str,
    target: IngestionTarget,
    payload_model: Type[BaseModel],
    allow_when_unset: bool,
    limiter: FixedWindowRateLimiter,
) -> APIRouter:
    """Router with the health check and POST receiver for one webhook."""
    router = APIRouter(prefix=prefix, tags=["webhooks"])

    @router.get("/health")
    async def health():
        return {"status": "ok"}

    @router.post(
        "/",
        response_model=WebhookResponse,
        response_model_exclude_none=True,
        responses={
            400: {"model": ErrorResponse},
            401: {"model": ErrorResponse},
            429: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def receive(request: Request):
        """Store a form submission, folding quick resubmissions into the earlier record."""
        if not verify_bearer(
            request.headers.get("Authorization"),
            settings.webhook_secret,
            allow_when_unset,
        ):
            return _error(401, "Unauthorized")

        address = client_address(request)
        if not limiter.allow(address):
            logger.warning(f"Rate limit exceeded on {prefix} for {address}")
            return _error(429, "Too many requests")

        try:
            body = await request.json()
        except ValueError:
            return _error(400, "Invalid JSON body")

        logger.info(f"Received {target.table} submission: {mask_pii(body)}")

        try:
            payload = validate_payload(payload_model, body)
        except PayloadValidationError as e:
            logger.warning(f"Validation failed on {prefix}: {e.field_errors}")
            return _error(400, "Invalid input", details=e.field_errors)

        fields = sanitize_fields(payload)

        conn = None
        try:
            conn = get_db_connection()
            result = ingest(
                conn,
                target,
                fields,
                window=timedelta(minutes=settings.dedupe_window_minutes),
            )
        except Exception:
            logger.exception(f"Webhook persistence error on {prefix}: {mask_pii(fields)}")
            return _error(500, "Internal server error")
        finally:
            if conn is not None:
                conn.close()

        return WebhookResponse(**result.to_response())

    return router


def inquiry_router(limiter: FixedWindowRateLimiter) -> APIRouter:
    # Accepts unauthenticated traffic while no secret is configured
    return build_webhook_router(
        "/webhook-inquiry", INQUIRY_TARGET, InquiryPayload, allow_when_unset=True, limiter=limiter
    )


def recruit_router(limiter: FixedWindowRateLimiter) -> APIRouter:
    return build_webhook_router(
        "/webhook-recruit", RECRUIT_TARGET, RecruitPayload, allow_when_unset=False, limiter=limiter
    )
