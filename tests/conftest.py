"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest

# Set test environment variables before importing the app
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("OTEL_LOG_RECORD_FORMAT", "console")

from payout_console.api.routes.payouts import get_payout_service
from payout_console.core.config import reload_settings
from payout_console.main import create_app
from payout_console.persistence.memory_store import InMemoryRecordStore
from payout_console.persistence.seed import build_seed_store
from payout_console.services.payout_service import PayoutQueryService

# Seed data and the funds snapshot are both laid out around this instant
FIXED_NOW = datetime(2025, 3, 12, 12, 0, tzinfo=UTC).astimezone()


def pytest_collection_modifyitems(config, items):
    """Mark tests by the directory they live in."""
    for item in items:
        parts = Path(str(item.fspath)).parts
        if "integration" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit" in parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Rebuild cached settings so env changes made by a test do not leak."""
    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def store(fixed_now) -> InMemoryRecordStore:
    """Seeded store laid out around FIXED_NOW."""
    return build_seed_store(now=fixed_now)


@pytest.fixture
def app(store, fixed_now):
    """App over the seeded store, with the snapshot computed for FIXED_NOW."""
    app = create_app(store=store)
    app.dependency_overrides[get_payout_service] = lambda: PayoutQueryService(
        store, clock=lambda: fixed_now
    )
    return app


@pytest.fixture
async def http_client(app):
    """HTTP client talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
