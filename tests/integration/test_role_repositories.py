"""Role, grant and user repository integration tests. Require Postgres; session is rolled back after each test."""

import pytest

from app.infrastructure.persistence.models import User
from app.infrastructure.persistence.repositories import (
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
)
from app.shared.utils.generators import generate_cuid


def _unique(prefix: str) -> str:
    return f"{prefix}-{generate_cuid()[:10]}"


@pytest.mark.requires_db
async def test_create_role_and_find_collision(db_session) -> None:
    """Create a role then find it by name or slug, but not when excluded."""
    repo = RoleRepository(db_session)
    slug = _unique("night-shift")
    created = await repo.create_role(f"Night {slug}", slug, "Evenings")
    assert created.id
    assert created.is_system is False

    found = await repo.find_by_name_or_slug("something else", slug)
    assert found is not None
    assert found.id == created.id
    assert await repo.find_by_name_or_slug("x", slug, exclude_id=created.id) is None


@pytest.mark.requires_db
async def test_replace_permission_keys_is_wholesale(db_session) -> None:
    roles = RoleRepository(db_session)
    grants = RolePermissionRepository(db_session)
    role = await roles.create_role(_unique("Ops"), _unique("ops"), None)

    assert await grants.replace_permission_keys(role.id, ["agents", "agents.addButton"]) == 2
    assert await grants.replace_permission_keys(role.id, ["dashboard", "dashboard"]) == 1
    assert await grants.get_permission_keys(role.id) == ["dashboard"]

    detail = await roles.get_detail(role.id)
    assert detail is not None
    assert detail.permission_keys == ["dashboard"]
    assert detail.permission_count == 1


@pytest.mark.requires_db
async def test_role_assignment_and_legacy_migration(db_session) -> None:
    roles = RoleRepository(db_session)
    users = UserRepository(db_session)
    role = await roles.create_role(_unique("Ops"), _unique("ops"), None)
    user = await users.create(
        User(email=f"{_unique('u')}@example.com", name="U", role="SUPPLIER", is_active=True)
    )

    assignment = await users.get_role_assignment(user.id)
    assert assignment is not None
    assert assignment.role == "SUPPLIER"
    assert assignment.role_id is None
    assert assignment.role_slug is None

    migrated = await users.assign_role_id_for_legacy_role("SUPPLIER", role.id)
    assert migrated >= 1
    assert await users.count_by_role_id(role.id) == migrated

    db_session.expire_all()
    assignment = await users.get_role_assignment(user.id)
    assert assignment is not None
    assert assignment.role_id == role.id
    assert assignment.role_slug == role.slug


@pytest.mark.requires_db
async def test_unknown_user_has_no_assignment(db_session) -> None:
    users = UserRepository(db_session)
    assert await users.get_role_assignment("does-not-exist") is None
    assert await users.update_role("does-not-exist", {"role": "VIEWER"}) is None
