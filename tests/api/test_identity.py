"""Tests for bearer-token identity: role assignment comes from the user record."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from app.api.v1.dependencies import get_authorization_service, get_user_repo
from app.application.dtos.user import UserResult
from app.application.services.authorization_service import AuthorizationService
from app.infrastructure.security import create_access_token


@pytest.fixture
def user_repo(app: FastAPI, auth_service: AuthorizationService) -> AsyncMock:
    repo = AsyncMock()
    repo.get_user.return_value = UserResult(
        id="u1", email="a@example.com", name="A", role="VIEWER", role_id=None, is_active=True
    )
    app.dependency_overrides[get_user_repo] = lambda: repo
    app.dependency_overrides[get_authorization_service] = lambda: auth_service
    return repo


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def test_role_claims_in_token_are_ignored(
    client: AsyncClient, user_repo: AsyncMock
) -> None:
    """A token claiming ADMIN for a VIEWER user gets the VIEWER view."""
    token = create_access_token("u1", {"role": "ADMIN", "roleId": "r-admin"})
    response = await client.get("/api/v1/permissions/mine", headers=_bearer(token))
    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "VIEWER"
    assert data["role_id"] is None
    assert data["permission_keys"] == []
    user_repo.get_user.assert_awaited_once_with("u1")


async def test_inactive_user_is_unauthenticated(
    client: AsyncClient, user_repo: AsyncMock
) -> None:
    user_repo.get_user.return_value = UserResult(
        id="u1", email="a@example.com", name="A", role="ADMIN", role_id=None, is_active=False
    )
    token = create_access_token("u1")
    response = await client.get("/api/v1/permissions/mine", headers=_bearer(token))
    assert response.status_code == 401


async def test_garbage_token_is_unauthenticated(
    client: AsyncClient, user_repo: AsyncMock
) -> None:
    response = await client.get("/api/v1/permissions/mine", headers=_bearer("not-a-jwt"))
    assert response.status_code == 401
    user_repo.get_user.assert_not_awaited()
