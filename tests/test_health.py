"""Smoke tests for health, readiness, and app wiring."""

import pytest
from httpx import AsyncClient

from app.api.v1.endpoints import health
from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.cache import PermissionCache


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_ready_without_database_returns_503(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    """GET /api/v1/health/ready returns 503 when SQL is not configured."""

    async def _not_configured() -> None:
        raise SqlNotConfiguredException()

    monkeypatch.setattr(health, "ping_database", _not_configured)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


async def test_ready_reports_cache_entries(
    client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
    permission_cache: PermissionCache,
) -> None:
    async def _ok() -> None:
        return None

    monkeypatch.setattr(health, "ping_database", _ok)
    permission_cache.set("u1", ["dashboard"])
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "permission_cache_entries": 1}


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    """A safe client X-Request-ID comes back unchanged; a missing one is generated."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "trace-42"})
    assert response.headers["X-Request-ID"] == "trace-42"
    generated = await client.get("/api/v1/health")
    assert generated.headers["X-Request-ID"]
    assert generated.headers["X-Request-ID"] != "trace-42"


async def test_unknown_route_returns_json_404(client: AsyncClient) -> None:
    response = await client.get("/api/v1/nope")
    assert response.status_code == 404
    assert response.json()["error"] == "HTTP_ERROR"
