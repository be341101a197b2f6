"""Pytest configuration and fixtures for dispatch-authz.

HTTP tests build the app with create_app() and override the identity,
authorization and service dependencies, so they run without Postgres or
Redis. DB fixtures skip unless DATABASE_URL points at a migrated database.
All imports use app.*.
"""

import os

# Settings require SECRET_KEY; set before anything reads get_settings().
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from collections.abc import AsyncIterator, Callable
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.dependencies import (
    get_authorization_service,
    get_current_identity_optional,
)
from app.application.dtos.identity import CallerIdentity
from app.application.services.authorization_service import AuthorizationService
from app.core.limiter import limiter
from app.infrastructure.cache import PermissionCache
from app.infrastructure.persistence import database
from app.main import create_app


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def permission_cache(clock: FakeClock) -> PermissionCache:
    return PermissionCache(ttl_seconds=60, clock=clock)


@pytest.fixture
def resolver() -> AsyncMock:
    """Permission resolver double; set resolver.resolve.return_value per test."""
    mock = AsyncMock()
    mock.resolve.return_value = frozenset()
    return mock


@pytest.fixture
def auth_service(resolver: AsyncMock, permission_cache: PermissionCache) -> AuthorizationService:
    return AuthorizationService(permission_resolver=resolver, cache=permission_cache)


@pytest.fixture
def app(permission_cache: PermissionCache) -> FastAPI:
    """Fresh app with lifespan-provided state set by hand (ASGITransport skips lifespan)."""
    application = create_app()
    application.state.permission_cache = permission_cache
    application.state.permission_publisher = None
    limiter.reset()
    return application


@pytest.fixture
def as_caller(
    app: FastAPI, auth_service: AuthorizationService
) -> Callable[[CallerIdentity | None], None]:
    """Return a function that makes requests arrive as the given identity."""

    def _set(identity: CallerIdentity | None) -> None:
        app.dependency_overrides[get_current_identity_optional] = lambda: identity
        app.dependency_overrides[get_authorization_service] = lambda: auth_service

    return _set


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """Database session for repository tests. Rolls back after test.

    Requires DATABASE_URL and `alembic upgrade head`. Skips (pytest.skip)
    when not configured. Mark tests with @pytest.mark.requires_db; run
    without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


class FakeTransaction:
    """session.begin() stand-in: records commit or rollback on exit."""

    def __init__(self, events: list[str]) -> None:
        self.events = events

    async def __aenter__(self) -> "FakeTransaction":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.events.append("rollback" if exc_type else "commit")
        return False


class FakeSession:
    """AsyncSession stand-in with real session.info and a recording transaction."""

    def __init__(self, events: list[str]) -> None:
        self.events = events
        self.info: dict = {}

    def begin(self) -> FakeTransaction:
        return FakeTransaction(self.events)

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Back get_db_transactional with FakeSession; returns the shared event log."""
    events: list[str] = []
    monkeypatch.setattr(
        database, "_require_session_factory", lambda: lambda: FakeSession(events)
    )
    return events
