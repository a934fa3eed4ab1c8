from __future__ import annotations

import os
import tempfile

# Set test environment BEFORE importing orbit modules.
# orbit.db creates the engine at module level using get_settings().db_url,
# so we must override the env vars before any orbit imports.
_test_tmp = tempfile.mkdtemp(prefix="orbit-test-")
os.environ.setdefault("DATA_DIR", os.path.join(_test_tmp, "data"))
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-integration-tests-only")

from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from orbit.client import HttpTransport, QueryCache, ReflectionClient
from orbit.db import get_session
from orbit.dependencies import require_owner
from orbit.main import app as fastapi_app
from orbit.models.reflection import Reflection

TEST_OWNER = "test-owner"


# ── Database fixtures ─────────────────────────────────────────────────


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool so every connection shares the same in-memory database.
    Recreates tables per test for full isolation.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Provide a fresh session per test."""
    with Session(engine) as session:
        yield session


# ── HTTP client fixtures ──────────────────────────────────────────────


def _override_dependencies(session: Session, with_auth: bool = True) -> None:
    def _get_session_override():
        yield session

    def _require_owner_override() -> str:
        return TEST_OWNER

    fastapi_app.dependency_overrides[get_session] = _get_session_override
    if with_auth:
        fastapi_app.dependency_overrides[require_owner] = _require_owner_override


@pytest.fixture(name="client")
def client_fixture(session):
    """FastAPI TestClient with overridden DB session and owner."""
    _override_dependencies(session)
    with TestClient(fastapi_app) as client:
        yield client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(name="client_no_auth")
def client_no_auth_fixture(session):
    """TestClient with DB override but NO auth override, for testing 401s."""
    _override_dependencies(session, with_auth=False)
    with TestClient(fastapi_app) as tc:
        yield tc
    fastapi_app.dependency_overrides.clear()


# ── Reflection client fixtures ────────────────────────────────────────


@pytest.fixture(name="cache")
def cache_fixture() -> QueryCache:
    return QueryCache()


@pytest_asyncio.fixture(name="reflection_client")
async def reflection_client_fixture(session, cache):
    """ReflectionClient talking HTTP to the app in-process via ASGITransport."""
    _override_dependencies(session)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=fastapi_app),
        base_url="http://testserver",
    ) as http:
        yield ReflectionClient(HttpTransport(client=http), cache=cache)
    fastapi_app.dependency_overrides.clear()


# ── Data helpers ──────────────────────────────────────────────────────


@pytest.fixture(name="make_reflection")
def make_reflection_fixture(session):
    """Insert a reflection row directly, with full control over timestamps."""

    def _make(
        created_at: datetime | None = None,
        owner_id: str = TEST_OWNER,
        mood: int = 6,
        energy: int = 50,
        **fields,
    ) -> Reflection:
        created_at = created_at or datetime.now(timezone.utc)
        reflection = Reflection(
            owner_id=owner_id,
            mood=mood,
            energy=energy,
            wins=fields.get("wins", "a win"),
            challenges=fields.get("challenges", "a challenge"),
            journal_entry=fields.get("journal_entry", "an entry"),
            tags=fields.get("tags", "[]"),
            created_at=created_at,
            updated_at=created_at,
        )
        session.add(reflection)
        session.commit()
        session.refresh(reflection)
        return reflection

    return _make
