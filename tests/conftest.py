"""Shared fixtures for the webhook service tests."""

import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from crm_intake.storage import get_connection, run_migrations
from crm_intake.webhook_api import config
from crm_intake.webhook_api.main import create_app

ENV_KEYS = (
    "CRM_WEBHOOK_SECRET",
    "CRM_ADMIN_SECRET",
    "CRM_ALLOWED_ORIGINS",
    "CRM_MARKETING_DATABASE_PATH",
    "CRM_RATE_LIMIT",
    "CRM_RATE_WINDOW_SECONDS",
    "CRM_DEDUPE_WINDOW_MINUTES",
)


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def conn(temp_data_dir):
    """Migrated connection on a temporary database."""
    conn = get_connection(temp_data_dir / "crm.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def configure(monkeypatch, temp_data_dir):
    """Point settings at the temp directory and apply extra env vars."""
    def _configure(**env):
        for key in ENV_KEYS:
            monkeypatch.delenv(key, raising=False)
        monkeypatch.setenv("CRM_DATABASE_PATH", str(temp_data_dir / "crm.db"))
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        monkeypatch.setattr(config, "_settings", None)
        return config.reload_settings()
    return _configure


@pytest.fixture
def make_client(configure):
    """Build a TestClient (lifespan included) for a given environment."""
    clients = []

    def _make(**env):
        configure(**env)
        client = TestClient(create_app())
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def fetch_rows(temp_data_dir):
    """Read rows from a marketing table of the temp database."""
    def _fetch(table):
        conn = get_connection(temp_data_dir / "crm.db")
        try:
            cursor = conn.execute(f"SELECT * FROM marketing.{table} ORDER BY id")
            return [dict(row) for row in cursor.fetchall()]
        finally:
            conn.close()
    return _fetch
