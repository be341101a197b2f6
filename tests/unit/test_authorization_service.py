"""Tests for AuthorizationService caching, invalidation, and require()."""

from unittest.mock import AsyncMock

import pytest

from app.application.dtos.identity import CallerIdentity
from app.application.services.authorization_service import (
    AuthorizationService,
    RouteRequirements,
)
from app.domain.exceptions import AuthorizationException
from app.infrastructure.cache import PermissionCache

ROLES_PAGE = RouteRequirements(("users.roles",), ("ADMIN",))
caller = CallerIdentity(id="u1", role="VIEWER", role_id="r1")


async def test_second_lookup_is_served_from_cache(
    auth_service: AuthorizationService, resolver: AsyncMock
) -> None:
    resolver.resolve.return_value = frozenset({"users", "users.roles"})
    first = await auth_service.get_user_permissions("u1")
    second = await auth_service.get_user_permissions("u1")
    assert first == second == frozenset({"users", "users.roles"})
    resolver.resolve.assert_awaited_once_with("u1")


async def test_expired_entry_is_resolved_again(
    auth_service: AuthorizationService, resolver: AsyncMock, clock
) -> None:
    resolver.resolve.return_value = frozenset({"dashboard"})
    await auth_service.get_user_permissions("u1")
    clock.advance(60)
    resolver.resolve.return_value = frozenset()
    assert await auth_service.get_user_permissions("u1") == frozenset()
    assert resolver.resolve.await_count == 2


async def test_stale_grants_apply_until_invalidated(
    auth_service: AuthorizationService, resolver: AsyncMock
) -> None:
    """Within the TTL a cached set answers even if the source changed."""
    resolver.resolve.return_value = frozenset({"users", "users.roles"})
    assert (await auth_service.authorize(caller, ROLES_PAGE)).allowed
    resolver.resolve.return_value = frozenset()
    assert (await auth_service.authorize(caller, ROLES_PAGE)).allowed

    await auth_service.invalidate_user("u1")
    assert not (await auth_service.authorize(caller, ROLES_PAGE)).allowed


async def test_invalidate_all_clears_every_user(
    auth_service: AuthorizationService,
    resolver: AsyncMock,
    permission_cache: PermissionCache,
) -> None:
    await auth_service.get_user_permissions("u1")
    await auth_service.get_user_permissions("u2")
    await auth_service.invalidate_all()
    assert len(permission_cache) == 0


async def test_require_raises_generic_forbidden(auth_service: AuthorizationService) -> None:
    with pytest.raises(AuthorizationException) as exc_info:
        await auth_service.require(caller, ROLES_PAGE)
    assert exc_info.value.error_code == "FORBIDDEN"
    assert exc_info.value.details == {}


async def test_require_passes_when_allowed(
    auth_service: AuthorizationService, resolver: AsyncMock
) -> None:
    resolver.resolve.return_value = frozenset({"users", "users.roles"})
    await auth_service.require(caller, ROLES_PAGE)


async def test_invalidation_is_published(
    resolver: AsyncMock, permission_cache: PermissionCache
) -> None:
    publisher = AsyncMock()
    service = AuthorizationService(resolver, permission_cache, publisher=publisher)
    await service.invalidate_user("u1")
    await service.invalidate_all()
    publisher.publish_user.assert_awaited_once_with("u1")
    publisher.publish_all.assert_awaited_once_with()
