"""Tests for RoleService (CRUD rules, grant replacement, seeding) with mocked repositories."""

from unittest.mock import AsyncMock, call

import pytest

from app.application.dtos.role import RoleDetailResult, RoleResult
from app.application.services.role_service import (
    SYSTEM_ROLES,
    RoleQueryService,
    RoleService,
    default_permission_keys,
    slugify,
    with_ancestors,
)
from app.domain.exceptions import (
    InvalidPermissionKeysException,
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    RoleInUseException,
    SystemRoleProtectedException,
)
from app.domain.permission_registry import ROOT_KEYS


def _role(
    role_id: str = "r1",
    slug: str = "ops",
    name: str = "Ops",
    is_system: bool = False,
) -> RoleResult:
    return RoleResult(
        id=role_id,
        name=name,
        slug=slug,
        description=None,
        is_system=is_system,
        is_active=True,
    )


@pytest.fixture
def role_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.find_by_name_or_slug.return_value = None
    return repo


@pytest.fixture
def role_permission_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.replace_permission_keys.side_effect = lambda role_id, keys: len(list(keys))
    return repo


@pytest.fixture
def user_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.count_by_role_id.return_value = 0
    repo.assign_role_id_for_legacy_role.return_value = 0
    return repo


@pytest.fixture
def invalidator() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(
    role_repo: AsyncMock,
    role_permission_repo: AsyncMock,
    user_repo: AsyncMock,
    invalidator: AsyncMock,
) -> RoleService:
    return RoleService(role_repo, role_permission_repo, user_repo, invalidator)


@pytest.mark.parametrize(
    ("name", "slug"),
    [
        ("Agent Manager", "agent-manager"),
        ("  Night Shift  ", "night-shift"),
        ("Ops / Finance #2", "ops-finance-2"),
        ("--Edge--", "edge"),
    ],
)
def test_slugify(name: str, slug: str) -> None:
    assert slugify(name) == slug


def test_with_ancestors_adds_prefixes_once() -> None:
    assert with_ancestors(["agents.table.editButton", "agents.addButton"]) == [
        "agents",
        "agents.table",
        "agents.table.editButton",
        "agents.addButton",
    ]


def test_default_permission_keys() -> None:
    """Module roles get whole modules; viewer gets pages; portal roles get nothing."""
    dispatcher = default_permission_keys("dispatcher")
    assert "dispatch.assignment.unlock48h" in dispatcher
    assert "locations.zones.deleteButton" in dispatcher
    assert not any(k.startswith("finance") for k in dispatcher)
    assert set(default_permission_keys("agent-manager")) >= {"agents", "customers.detail"}
    viewer = default_permission_keys("viewer")
    assert viewer == [k for k in ROOT_KEYS if k not in {"users", "company", "whatsapp"}]
    assert default_permission_keys("rep") == []
    assert default_permission_keys("admin") == []


async def test_find_by_id_not_found(role_repo: AsyncMock) -> None:
    role_repo.get_detail.return_value = None
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await RoleQueryService(role_repo).find_by_id("missing")
    assert exc_info.value.details["resource_type"] == "role"


async def test_find_by_id_returns_detail(role_repo: AsyncMock) -> None:
    detail = RoleDetailResult(
        id="r1", name="Ops", slug="ops", description=None, is_system=False,
        is_active=True, permission_keys=["dashboard"],
    )
    role_repo.get_detail.return_value = detail
    assert await RoleQueryService(role_repo).find_by_id("r1") is detail


async def test_create_derives_slug_and_invalidates(
    service: RoleService, role_repo: AsyncMock, invalidator: AsyncMock
) -> None:
    role_repo.create_role.return_value = _role(slug="night-shift", name="Night Shift")
    created = await service.create("Night Shift", "Evenings")
    role_repo.find_by_name_or_slug.assert_awaited_once_with("Night Shift", "night-shift")
    role_repo.create_role.assert_awaited_once_with("Night Shift", "night-shift", "Evenings")
    assert created.slug == "night-shift"
    invalidator.invalidate_all.assert_awaited_once()


async def test_create_duplicate_raises_conflict(
    service: RoleService, role_repo: AsyncMock, invalidator: AsyncMock
) -> None:
    role_repo.find_by_name_or_slug.return_value = _role()
    with pytest.raises(RoleAlreadyExistsException):
        await service.create("Ops")
    role_repo.create_role.assert_not_awaited()
    invalidator.invalidate_all.assert_not_awaited()


async def test_update_name_reslugs(
    service: RoleService, role_repo: AsyncMock, invalidator: AsyncMock
) -> None:
    role_repo.get_role.return_value = _role()
    role_repo.update_role.return_value = _role(slug="field-ops", name="Field Ops")
    await service.update("r1", {"name": "Field Ops", "is_active": False})
    role_repo.find_by_name_or_slug.assert_awaited_once_with(
        "Field Ops", "field-ops", exclude_id="r1"
    )
    role_repo.update_role.assert_awaited_once_with(
        "r1", {"name": "Field Ops", "slug": "field-ops", "is_active": False}
    )
    invalidator.invalidate_all.assert_awaited_once()


async def test_update_rename_onto_existing_conflicts(
    service: RoleService, role_repo: AsyncMock
) -> None:
    role_repo.get_role.return_value = _role()
    role_repo.find_by_name_or_slug.return_value = _role(role_id="r2", slug="admin")
    with pytest.raises(RoleAlreadyExistsException):
        await service.update("r1", {"name": "Admin"})


async def test_update_without_changes_is_noop(
    service: RoleService, role_repo: AsyncMock, invalidator: AsyncMock
) -> None:
    existing = _role()
    role_repo.get_role.return_value = existing
    assert await service.update("r1", {}) is existing
    role_repo.update_role.assert_not_awaited()
    invalidator.invalidate_all.assert_not_awaited()


async def test_delete_system_role_forbidden(
    service: RoleService, role_repo: AsyncMock
) -> None:
    role_repo.get_role.return_value = _role(slug="viewer", is_system=True)
    with pytest.raises(SystemRoleProtectedException):
        await service.delete("r1")
    role_repo.delete_role.assert_not_awaited()


async def test_delete_role_in_use_conflicts(
    service: RoleService, role_repo: AsyncMock, user_repo: AsyncMock
) -> None:
    role_repo.get_role.return_value = _role()
    user_repo.count_by_role_id.return_value = 2
    with pytest.raises(RoleInUseException) as exc_info:
        await service.delete("r1")
    assert exc_info.value.details["user_count"] == 2


async def test_delete_removes_grants_then_role(
    service: RoleService,
    role_repo: AsyncMock,
    role_permission_repo: AsyncMock,
    invalidator: AsyncMock,
) -> None:
    role_repo.get_role.return_value = _role()
    await service.delete("r1")
    role_permission_repo.delete_for_role.assert_awaited_once_with("r1")
    role_repo.delete_role.assert_awaited_once_with("r1")
    invalidator.invalidate_all.assert_awaited_once()


async def test_delete_missing_role(service: RoleService, role_repo: AsyncMock) -> None:
    role_repo.get_role.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.delete("nope")


async def test_set_permissions_adds_ancestors(
    service: RoleService,
    role_repo: AsyncMock,
    role_permission_repo: AsyncMock,
    invalidator: AsyncMock,
) -> None:
    role_repo.get_role.return_value = _role()
    result = await service.set_role_permissions("r1", ["users.roles.addButton"])
    role_permission_repo.replace_permission_keys.assert_awaited_once_with(
        "r1", ["users", "users.roles", "users.roles.addButton"]
    )
    assert result.role_id == "r1"
    assert result.permission_count == 3
    invalidator.invalidate_all.assert_awaited_once()


async def test_set_permissions_empty_clears_grants(
    service: RoleService, role_repo: AsyncMock, role_permission_repo: AsyncMock
) -> None:
    role_repo.get_role.return_value = _role()
    result = await service.set_role_permissions("r1", [])
    role_permission_repo.replace_permission_keys.assert_awaited_once_with("r1", [])
    assert result.permission_count == 0


async def test_set_permissions_on_admin_forbidden(
    service: RoleService, role_repo: AsyncMock, role_permission_repo: AsyncMock
) -> None:
    role_repo.get_role.return_value = _role(slug="admin", is_system=True)
    with pytest.raises(SystemRoleProtectedException):
        await service.set_role_permissions("r1", ["dashboard"])
    role_permission_repo.replace_permission_keys.assert_not_awaited()


async def test_set_permissions_rejects_unknown_keys(
    service: RoleService, role_repo: AsyncMock, role_permission_repo: AsyncMock
) -> None:
    role_repo.get_role.return_value = _role()
    with pytest.raises(InvalidPermissionKeysException) as exc_info:
        await service.set_role_permissions("r1", ["dashboard", "bogus.key"])
    assert exc_info.value.details == {"invalid_keys": ["bogus.key"]}
    role_permission_repo.replace_permission_keys.assert_not_awaited()


async def test_seed_upserts_roles_grants_defaults_and_migrates(
    service: RoleService,
    role_repo: AsyncMock,
    role_permission_repo: AsyncMock,
    user_repo: AsyncMock,
    invalidator: AsyncMock,
) -> None:
    role_repo.upsert_system_role.side_effect = lambda slug, name, description: _role(
        role_id=f"id-{slug}", slug=slug, name=name, is_system=True
    )
    role_repo.slug_to_id.return_value = {slug: f"id-{slug}" for slug, _, _ in SYSTEM_ROLES}
    user_repo.assign_role_id_for_legacy_role.return_value = 2

    result = await service.seed_system_roles()

    assert role_repo.upsert_system_role.await_count == len(SYSTEM_ROLES)
    granted_roles = [c.args[0] for c in role_permission_repo.replace_permission_keys.await_args_list]
    # admin, rep and driver keep whatever they had
    assert granted_roles == ["id-dispatcher", "id-accountant", "id-agent-manager", "id-viewer"]
    assert call("DISPATCHER", "id-dispatcher") in user_repo.assign_role_id_for_legacy_role.await_args_list
    assert call("ADMIN", "id-admin") in user_repo.assign_role_id_for_legacy_role.await_args_list
    assert result.roles_seeded == 7
    assert result.users_migrated == 14
    invalidator.invalidate_all.assert_awaited_once()


async def test_seed_skips_migration_for_missing_slug(
    service: RoleService, role_repo: AsyncMock, user_repo: AsyncMock
) -> None:
    role_repo.upsert_system_role.side_effect = lambda slug, name, description: _role(
        role_id=f"id-{slug}", slug=slug, is_system=True
    )
    role_repo.slug_to_id.return_value = {"viewer": "id-viewer"}
    user_repo.assign_role_id_for_legacy_role.return_value = 5
    result = await service.seed_system_roles()
    user_repo.assign_role_id_for_legacy_role.assert_awaited_once_with("VIEWER", "id-viewer")
    assert result.users_migrated == 5
