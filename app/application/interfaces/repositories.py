"""Repository interfaces (ports) for the application layer.

Protocols describe the read/write shapes the services need from storage.
SQLAlchemy implementations live in app.infrastructure.persistence.repositories.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.role import RoleDetailResult, RoleResult
    from app.application.dtos.user import RoleAssignment, UserResult


class IUserRepository(Protocol):
    """User reads and role-assignment writes."""

    async def get_role_assignment(self, user_id: str) -> RoleAssignment | None:
        """Return user -> {role_id, role, role slug/is_system}, or None if no user."""
        ...

    async def get_user(self, user_id: str) -> UserResult | None:
        ...

    async def update_role(
        self, user_id: str, changes: dict[str, Any]
    ) -> UserResult | None:
        """Apply role / role_id changes; None if the user does not exist."""
        ...

    async def count_by_role_id(self, role_id: str) -> int:
        ...

    async def assign_role_id_for_legacy_role(self, legacy_role: str, role_id: str) -> int:
        """Set role_id on users with this legacy role and no role_id; return row count."""
        ...


class IRoleRepository(Protocol):
    """Granular role CRUD."""

    async def list_roles(self) -> list[RoleResult]:
        ...

    async def get_detail(self, role_id: str) -> RoleDetailResult | None:
        ...

    async def get_role(self, role_id: str) -> RoleResult | None:
        ...

    async def find_by_name_or_slug(
        self, name: str, slug: str, *, exclude_id: str | None = None
    ) -> RoleResult | None:
        ...

    async def create_role(
        self, name: str, slug: str, description: str | None, *, is_system: bool = False
    ) -> RoleResult:
        ...

    async def update_role(self, role_id: str, changes: dict[str, Any]) -> RoleResult | None:
        ...

    async def upsert_system_role(
        self, slug: str, name: str, description: str
    ) -> RoleResult:
        ...

    async def delete_role(self, role_id: str) -> None:
        ...

    async def slug_to_id(self) -> dict[str, str]:
        ...


class IRolePermissionRepository(Protocol):
    """Role -> permission-key grants."""

    async def get_permission_keys(self, role_id: str) -> list[str]:
        """Return the keys granted to role_id (empty if none or unknown)."""
        ...

    async def replace_permission_keys(self, role_id: str, keys: Iterable[str]) -> int:
        """Delete all grants for role_id then insert keys; return inserted count."""
        ...

    async def delete_for_role(self, role_id: str) -> None:
        ...
