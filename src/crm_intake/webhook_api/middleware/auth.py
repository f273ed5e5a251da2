"""Bearer-secret and admin-secret authentication."""

import hmac
from typing import Optional

from fastapi import HTTPException, Request

from ..config import settings


def verify_bearer(
    authorization: Optional[str],
    secret: Optional[str],
    allow_when_unset: bool,
) -> bool:
    """Check an ``Authorization`` header against the configured secret.

    With no secret configured the endpoint policy decides: the inquiry
    webhook still accepts traffic while senders migrate, the recruit
    webhook refuses everything.
    """
    if not secret:
        return allow_when_unset
    expected = f"Bearer {secret}"
    return hmac.compare_digest((authorization or "").encode(), expected.encode())


async def verify_admin_secret(request: Request):
    """Guard the inquiry desk with the ``X-Admin-Secret`` header."""
    admin_secret = settings.admin_secret
    supplied = request.headers.get("X-Admin-Secret")
    if admin_secret and supplied and hmac.compare_digest(supplied.encode(), admin_secret.encode()):
        return True

    raise HTTPException(
        status_code=401,
        detail={"success": False, "error": "auth_error", "detail": "Invalid or missing authentication"},
    )
