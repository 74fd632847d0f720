"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Ensure a valid CLOVER_SESSION_SECRET is always set for test runs.
# This must happen before the API lifespan validates the secret.
# ---------------------------------------------------------------------------
_TEST_SESSION_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("CLOVER_SESSION_SECRET", _TEST_SESSION_SECRET)

import pytest  # noqa: E402

from clover.config import CloverConfig  # noqa: E402
from clover.database.seed import SeedSummary, seed_sample_data  # noqa: E402
from clover.domain.entities import ActivityCreate, TeamCreate, UserCreate  # noqa: E402
from clover.services.auth_service import AuthService, hash_password  # noqa: E402
from clover.services.notices import NoticeBuffer  # noqa: E402
from clover.services.session_slot import MemorySessionSlot  # noqa: E402
from clover.services.store import Database  # noqa: E402

SEED_PASSWORD = "clover-sample-password"


@pytest.fixture
def secret() -> str:
    return os.environ["CLOVER_SESSION_SECRET"]


@pytest.fixture
def store() -> Database:
    """A fresh, empty in-memory store."""
    return Database()


@pytest.fixture
def seeded() -> tuple[Database, SeedSummary]:
    """A store holding the sample community (password: ``SEED_PASSWORD``)."""
    db = Database()
    summary = seed_sample_data(db, password_hash=hash_password(SEED_PASSWORD))
    return db, summary


@pytest.fixture
def slot() -> MemorySessionSlot:
    return MemorySessionSlot()


@pytest.fixture
def notices() -> NoticeBuffer:
    return NoticeBuffer(capacity=50)


@pytest.fixture
def auth(store: Database, slot: MemorySessionSlot, notices: NoticeBuffer, secret: str) -> AuthService:
    return AuthService(store, slot, secret=secret, notify=notices)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def make_user(store: Database, name: str = "Test User", email: str | None = None):
    email = email or f"{name.lower().replace(' ', '.')}@example.com"
    return store.create_user(UserCreate(name=name, email=email))


def make_activity(store: Database, host_id: str, **overrides):
    fields = {
        "title": "Sunday Run",
        "category": "Running",
        "location": "Riverside",
        "date": "2025-06-01",
        "time": "7:00 AM",
        "duration": 1.5,
        "host_id": host_id,
    }
    fields.update(overrides)
    return store.create_activity(ActivityCreate(**fields))


def make_team(store: Database, captain_id: str, **overrides):
    fields = {
        "name": "Riverside Runners",
        "sport": "Running",
        "captain_id": captain_id,
        "location": "Riverside",
    }
    fields.update(overrides)
    return store.create_team(TeamCreate(**fields))


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
@pytest.fixture
def api_config(tmp_path) -> CloverConfig:
    return CloverConfig(
        community_name="Clover Sports",
        session_slot_path=str(tmp_path / "session.jwt"),
        seed_sample_data=True,
        seed_password=SEED_PASSWORD,
        notice_capacity=50,
    )


@pytest.fixture
def client(api_config: CloverConfig):
    """A started FastAPI TestClient over a seeded app."""
    from fastapi.testclient import TestClient

    from clover.api.main import create_app

    with TestClient(create_app(api_config), raise_server_exceptions=False) as test_client:
        yield test_client
