"""User repository: identity lookups and role assignment. Interface methods return application DTOs."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import RoleAssignment, UserResult
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository

_ROLE_FIELDS = frozenset({"role", "role_id"})


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult."""
    return UserResult(
        id=u.id,
        email=u.email,
        name=u.name,
        role=u.role,
        role_id=u.role_id,
        is_active=u.is_active,
    )


class UserRepository(BaseRepository[User]):
    """User repository. Role-assignment reads for permission resolution and role writes."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_user(self, user_id: str) -> UserResult | None:
        user = await self.get_by_id(user_id)
        return _user_to_result(user) if user else None

    async def get_role_assignment(self, user_id: str) -> RoleAssignment | None:
        """Return the user's legacy role, role_id and the granular role's slug in one query."""
        result = await self.db.execute(
            select(User.id, User.role, User.role_id, Role.slug, Role.is_system)
            .outerjoin(Role, Role.id == User.role_id)
            .where(User.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        uid, role, role_id, slug, is_system = row
        return RoleAssignment(
            user_id=uid,
            role=role,
            role_id=role_id,
            role_slug=slug,
            role_is_system=is_system,
        )

    async def update_role(
        self, user_id: str, changes: dict[str, Any]
    ) -> UserResult | None:
        """Apply role and/or role_id; other keys are rejected."""
        unknown = set(changes) - _ROLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported user role fields: {sorted(unknown)}")
        user = await self.get_by_id(user_id)
        if user is None:
            return None
        updated = await self.apply_changes(user, changes)
        return _user_to_result(updated)

    async def count_by_role_id(self, role_id: str) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(User.role_id == role_id)
        )
        return int(result.scalar_one())

    async def assign_role_id_for_legacy_role(
        self, legacy_role: str, role_id: str
    ) -> int:
        """Point users with this legacy role and no granular role at role_id."""
        result = await self.db.execute(
            update(User)
            .where(User.role == legacy_role, User.role_id.is_(None))
            .values(role_id=role_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
