"""Role application service: role CRUD, grant replacement, and system-role seeding.

Every write invalidates the whole permission cache, since any user holding
the role may be affected. The invalidator is bound to the request
transaction and fires once it commits.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from app.application.dtos.role import (
    RoleDetailResult,
    RolePermissionsSetResult,
    RoleResult,
    SeedResult,
)
from app.application.interfaces.repositories import (
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
)
from app.application.interfaces.services import IPermissionInvalidator
from app.core.constants import ADMIN_ROLE_SLUG
from app.domain.exceptions import (
    InvalidPermissionKeysException,
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    RoleInUseException,
    SystemRoleProtectedException,
)
from app.domain.permission_registry import (
    ROOT_KEYS,
    find_invalid_keys,
    get_all_permission_keys,
    get_ancestor_keys,
    iter_entries,
)

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """'Agent Manager' -> 'agent-manager'."""
    return _NON_ALNUM.sub("-", name.strip().lower()).strip("-")


# (slug, name, description); order is seed order.
SYSTEM_ROLES: tuple[tuple[str, str, str], ...] = (
    (ADMIN_ROLE_SLUG, "Admin", "Full system access"),
    ("dispatcher", "Dispatcher", "Controls traffic jobs and dispatch operations"),
    ("accountant", "Accountant", "Handles finance and financial reports"),
    ("agent-manager", "Agent Manager", "Manages agents, customers, and bookings"),
    ("viewer", "Viewer", "Read-only access to all modules"),
    ("rep", "Rep", "Field representative portal user"),
    ("driver", "Driver", "Driver portal user"),
)

_DEFAULT_MODULES: dict[str, tuple[str, ...]] = {
    "dispatcher": (
        "dashboard",
        "dispatch",
        "traffic-jobs",
        "vehicles",
        "drivers",
        "reps",
        "locations",
    ),
    "accountant": (
        "dashboard",
        "finance",
        "reports",
        "agents",
        "customers",
        "suppliers",
    ),
    "agent-manager": ("dashboard", "agents", "customers", "traffic-jobs"),
}

_VIEWER_EXCLUDED_PAGES = frozenset({"users", "company", "whatsapp"})

LEGACY_ROLE_TO_SLUG: dict[str, str] = {
    "ADMIN": ADMIN_ROLE_SLUG,
    "DISPATCHER": "dispatcher",
    "ACCOUNTANT": "accountant",
    "AGENT_MANAGER": "agent-manager",
    "VIEWER": "viewer",
    "REP": "rep",
    "DRIVER": "driver",
}


def default_permission_keys(slug: str) -> list[str]:
    """Default grants for a system role slug, in catalog order.

    Module roles get every key under their modules; viewer gets page-level
    keys except users, company and whatsapp; anything else gets none.
    """
    if slug == "viewer":
        return [k for k in ROOT_KEYS if k not in _VIEWER_EXCLUDED_PAGES]
    modules = _DEFAULT_MODULES.get(slug)
    if not modules:
        return []
    return [
        entry.key
        for entry in iter_entries()
        if entry.key.split(".", 1)[0] in modules
    ]


def with_ancestors(keys: Iterable[str]) -> list[str]:
    """Return keys plus every ancestor of each, first-seen order, no duplicates."""
    closed: dict[str, None] = {}
    for key in keys:
        for ancestor in get_ancestor_keys(key):
            closed.setdefault(ancestor, None)
        closed.setdefault(key, None)
    return list(closed)


class RoleQueryService:
    """Read-only role queries."""

    def __init__(self, role_repo: IRoleRepository) -> None:
        self._role_repo = role_repo

    async def find_all(self) -> list[RoleResult]:
        return await self._role_repo.list_roles()

    async def find_by_id(self, role_id: str) -> RoleDetailResult:
        detail = await self._role_repo.get_detail(role_id)
        if detail is None:
            raise ResourceNotFoundException("role", role_id)
        return detail


class RoleService:
    """Granular role administration."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        role_permission_repo: IRolePermissionRepository,
        user_repo: IUserRepository,
        invalidator: IPermissionInvalidator,
    ) -> None:
        self._role_repo = role_repo
        self._role_permission_repo = role_permission_repo
        self._user_repo = user_repo
        self._invalidator = invalidator

    async def create(self, name: str, description: str | None = None) -> RoleResult:
        """Create a non-system role with a slug derived from name.

        Raises:
            RoleAlreadyExistsException: name or slug already taken.
        """
        slug = slugify(name)
        if await self._role_repo.find_by_name_or_slug(name, slug):
            raise RoleAlreadyExistsException(name)
        created = await self._role_repo.create_role(name, slug, description)
        logger.info("Role created: %s (%s)", created.slug, created.id)
        await self._invalidator.invalidate_all()
        return created

    async def update(self, role_id: str, changes: dict[str, Any]) -> RoleResult:
        """Apply name / description / is_active changes; a new name re-slugs.

        Only keys present in changes are written.
        """
        existing = await self._role_repo.get_role(role_id)
        if existing is None:
            raise ResourceNotFoundException("role", role_id)
        data: dict[str, Any] = {}
        if "name" in changes and changes["name"] is not None:
            name = changes["name"]
            slug = slugify(name)
            if await self._role_repo.find_by_name_or_slug(
                name, slug, exclude_id=role_id
            ):
                raise RoleAlreadyExistsException(name)
            data["name"] = name
            data["slug"] = slug
        if "description" in changes:
            data["description"] = changes["description"]
        if "is_active" in changes and changes["is_active"] is not None:
            data["is_active"] = changes["is_active"]
        if not data:
            return existing
        updated = await self._role_repo.update_role(role_id, data)
        if updated is None:
            raise ResourceNotFoundException("role", role_id)
        await self._invalidator.invalidate_all()
        return updated

    async def delete(self, role_id: str) -> None:
        """Delete a non-system role that no user is assigned to, with its grants."""
        role = await self._role_repo.get_role(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if role.is_system:
            raise SystemRoleProtectedException("Cannot delete a system role", role_id)
        user_count = await self._user_repo.count_by_role_id(role_id)
        if user_count > 0:
            raise RoleInUseException(role_id, user_count)
        await self._role_permission_repo.delete_for_role(role_id)
        await self._role_repo.delete_role(role_id)
        logger.info("Role deleted: %s (%s)", role.slug, role_id)
        await self._invalidator.invalidate_all()

    async def set_role_permissions(
        self, role_id: str, permission_keys: list[str]
    ) -> RolePermissionsSetResult:
        """Replace a role's grants with permission_keys plus all their ancestors.

        Raises:
            ResourceNotFoundException: unknown role.
            SystemRoleProtectedException: the admin role (always has everything).
            InvalidPermissionKeysException: any key not in the registry.
        """
        role = await self._role_repo.get_role(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if role.slug == ADMIN_ROLE_SLUG:
            raise SystemRoleProtectedException(
                "Cannot modify Admin role permissions; Admin always has full access",
                role_id,
            )
        invalid = find_invalid_keys(permission_keys)
        if invalid:
            raise InvalidPermissionKeysException(invalid)
        keys = with_ancestors(permission_keys)
        count = await self._role_permission_repo.replace_permission_keys(role_id, keys)
        logger.info("Role %s permissions replaced: %d keys", role.slug, count)
        await self._invalidator.invalidate_all()
        return RolePermissionsSetResult(role_id=role_id, permission_count=count)

    async def seed_system_roles(self) -> SeedResult:
        """Upsert system roles with default grants, then map legacy users onto them.

        Roles whose default set is empty (admin, rep, driver) keep whatever
        grants they already have. Users that already have a role_id are left alone.
        """
        all_keys = get_all_permission_keys()
        for slug, name, description in SYSTEM_ROLES:
            role = await self._role_repo.upsert_system_role(slug, name, description)
            if slug == ADMIN_ROLE_SLUG:
                continue
            defaults = [k for k in default_permission_keys(slug) if k in all_keys]
            if defaults:
                await self._role_permission_repo.replace_permission_keys(
                    role.id, defaults
                )

        slug_to_id = await self._role_repo.slug_to_id()
        migrated = 0
        for legacy_role, slug in LEGACY_ROLE_TO_SLUG.items():
            target = slug_to_id.get(slug)
            if target:
                migrated += await self._user_repo.assign_role_id_for_legacy_role(
                    legacy_role, target
                )
        logger.info(
            "Seeded %d system roles; migrated %d legacy users",
            len(SYSTEM_ROLES),
            migrated,
        )
        await self._invalidator.invalidate_all()
        return SeedResult(roles_seeded=len(SYSTEM_ROLES), users_migrated=migrated)
