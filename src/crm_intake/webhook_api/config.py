"""Environment-based configuration for the webhook service."""

import logging
import os
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings:
    """Service configuration loaded from environment variables."""

    def __init__(self):
        # Shared bearer secret for both webhooks. Each endpoint decides what
        # an unset secret means.
        self.webhook_secret: Optional[str] = os.getenv("CRM_WEBHOOK_SECRET") or None
        self.admin_secret: Optional[str] = os.getenv("CRM_ADMIN_SECRET") or None

        self.host = os.getenv("CRM_API_HOST", "0.0.0.0")
        self.port = int(os.getenv("CRM_API_PORT", "8000"))
        self.db_path = os.getenv(
            "CRM_DATABASE_PATH",
            str(Path.home() / ".crm-intake" / "crm.db"),
        )
        self.marketing_db_path = os.getenv(
            "CRM_MARKETING_DATABASE_PATH",
            str(Path(self.db_path).parent / "marketing.db"),
        )
        self.debug = os.getenv("CRM_ENV", "production") != "production"

        # CORS; an empty list means any origin
        self.allowed_origins = _split_origins(os.getenv("CRM_ALLOWED_ORIGINS", ""))

        # Rate limiting
        self.rate_limit = int(os.getenv("CRM_RATE_LIMIT", "10"))
        self.rate_window_seconds = int(os.getenv("CRM_RATE_WINDOW_SECONDS", "60"))

        # Dedupe lookback
        self.dedupe_window_minutes = int(os.getenv("CRM_DEDUPE_WINDOW_MINUTES", "10"))

        if self.webhook_secret is None:
            logger.warning(
                "CRM_WEBHOOK_SECRET is not set: /webhook-inquiry accepts "
                "unauthenticated requests and /webhook-recruit rejects all requests"
            )


_settings = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Rebuild settings from the current environment."""
    global _settings
    _settings = Settings()
    return _settings


class _SettingsProxy:
    """Lazy proxy so settings aren't loaded until first access."""

    def __getattr__(self, name):
        return getattr(_get_settings(), name)


settings = _SettingsProxy()
