"""CORS configuration.

The webhooks only accept form posts; the desk API under ``DESK_PREFIX``
also needs reads and updates. Each side gets its own CORSMiddleware.
"""

from typing import List

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from ..config import settings

DESK_PREFIX = "/v1/"

WEBHOOK_METHODS = ["POST", "OPTIONS"]
WEBHOOK_HEADERS = ["Content-Type", "Authorization", "apikey"]

DESK_METHODS = ["GET", "POST", "PUT", "OPTIONS"]
DESK_HEADERS = ["Content-Type", "X-Admin-Secret"]


def allowed_origins() -> List[str]:
    """Configured origin allow-list, or every origin when none is set."""
    return list(settings.allowed_origins) or ["*"]


class ScopedCORSMiddleware:
    """Route each request to the webhook or desk CORS policy by path."""

    def __init__(self, app: ASGIApp, origins: List[str]):
        self.webhook_cors = CORSMiddleware(
            app,
            allow_origins=origins,
            allow_methods=WEBHOOK_METHODS,
            allow_headers=WEBHOOK_HEADERS,
        )
        self.desk_cors = CORSMiddleware(
            app,
            allow_origins=origins,
            allow_methods=DESK_METHODS,
            allow_headers=DESK_HEADERS,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] == "http" and scope["path"].startswith(DESK_PREFIX):
            await self.desk_cors(scope, receive, send)
        else:
            await self.webhook_cors(scope, receive, send)
