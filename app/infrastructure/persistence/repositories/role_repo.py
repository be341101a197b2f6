"""Role repository. Read methods return RoleResult (DTO); ORM rows stay inside."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import RoleDetailResult, RoleResult
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.role_permission import RolePermission
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository


def _role_to_result(
    r: Role, *, user_count: int = 0, permission_count: int = 0
) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        name=r.name,
        slug=r.slug,
        description=r.description,
        is_system=r.is_system,
        is_active=r.is_active,
        user_count=user_count,
        permission_count=permission_count,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def _with_counts() -> Select[tuple[Role, int, int]]:
    """Select Role with assigned-user and grant counts as correlated subqueries."""
    user_count = (
        select(func.count(User.id))
        .where(User.role_id == Role.id)
        .correlate(Role)
        .scalar_subquery()
    )
    permission_count = (
        select(func.count(RolePermission.id))
        .where(RolePermission.role_id == Role.id)
        .correlate(Role)
        .scalar_subquery()
    )
    return select(Role, user_count, permission_count)


class RoleRepository(BaseRepository[Role]):
    """Granular role CRUD. Grants live in RolePermissionRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def list_roles(self) -> list[RoleResult]:
        """All roles, system roles first, then by name."""
        q = _with_counts().order_by(Role.is_system.desc(), Role.name.asc())
        result = await self.db.execute(q)
        return [
            _role_to_result(role, user_count=users, permission_count=perms)
            for role, users, perms in result.all()
        ]

    async def get_role(self, role_id: str) -> RoleResult | None:
        role = await self.get_by_id(role_id)
        return _role_to_result(role) if role else None

    async def get_detail(self, role_id: str) -> RoleDetailResult | None:
        """Role with user count and granted keys, or None."""
        result = await self.db.execute(_with_counts().where(Role.id == role_id))
        row = result.one_or_none()
        if row is None:
            return None
        role, users, perms = row
        keys_result = await self.db.execute(
            select(RolePermission.permission_key)
            .where(RolePermission.role_id == role_id)
            .order_by(RolePermission.permission_key)
        )
        return RoleDetailResult(
            id=role.id,
            name=role.name,
            slug=role.slug,
            description=role.description,
            is_system=role.is_system,
            is_active=role.is_active,
            user_count=users,
            permission_count=perms,
            created_at=role.created_at,
            updated_at=role.updated_at,
            permission_keys=list(keys_result.scalars().all()),
        )

    async def find_by_name_or_slug(
        self, name: str, slug: str, *, exclude_id: str | None = None
    ) -> RoleResult | None:
        """First role whose name or slug collides, optionally ignoring one id."""
        q = select(Role).where(or_(Role.name == name, Role.slug == slug))
        if exclude_id is not None:
            q = q.where(Role.id != exclude_id)
        result = await self.db.execute(q.limit(1))
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def create_role(
        self,
        name: str,
        slug: str,
        description: str | None,
        *,
        is_system: bool = False,
    ) -> RoleResult:
        """Create a role; return read-model DTO."""
        role = Role(
            name=name,
            slug=slug,
            description=description,
            is_system=is_system,
            is_active=True,
        )
        created = await self.create(role)
        return _role_to_result(created)

    async def update_role(
        self, role_id: str, changes: dict[str, Any]
    ) -> RoleResult | None:
        role = await self.get_by_id(role_id)
        if role is None:
            return None
        updated = await self.apply_changes(role, changes)
        return _role_to_result(updated)

    async def upsert_system_role(
        self, slug: str, name: str, description: str
    ) -> RoleResult:
        """Create the system role for slug, or refresh name/description and mark it system."""
        result = await self.db.execute(select(Role).where(Role.slug == slug))
        role = result.scalar_one_or_none()
        if role is None:
            created = await self.create(
                Role(
                    name=name,
                    slug=slug,
                    description=description,
                    is_system=True,
                    is_active=True,
                )
            )
            return _role_to_result(created)
        updated = await self.apply_changes(
            role, {"name": name, "description": description, "is_system": True}
        )
        return _role_to_result(updated)

    async def delete_role(self, role_id: str) -> None:
        role = await self.get_by_id(role_id)
        if role is not None:
            await self.delete(role)

    async def slug_to_id(self) -> dict[str, str]:
        """Map of every role slug to its id."""
        result = await self.db.execute(select(Role.slug, Role.id))
        return {slug: role_id for slug, role_id in result.all()}
