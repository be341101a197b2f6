"""RolePermission repository: permission-key grants per role (single entity responsibility)."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.role_permission import RolePermission
from app.shared.utils.generators import generate_cuid


class RolePermissionRepository:
    """Grant table only. Read keys for a role; replace or drop all of a role's grants."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_permission_keys(self, role_id: str) -> list[str]:
        result = await self.db.execute(
            select(RolePermission.permission_key).where(
                RolePermission.role_id == role_id
            )
        )
        return list(result.scalars().all())

    async def replace_permission_keys(self, role_id: str, keys: Iterable[str]) -> int:
        """Delete every grant for role_id, then insert keys (deduplicated). Returns count.

        Both statements run in the caller's transaction, so a failure leaves
        the previous grant set intact.
        """
        unique_keys = list(dict.fromkeys(keys))
        await self.delete_for_role(role_id)
        if unique_keys:
            await self.db.execute(
                insert(RolePermission),
                [
                    {"id": generate_cuid(), "role_id": role_id, "permission_key": key}
                    for key in unique_keys
                ],
            )
        await self.db.flush()
        return len(unique_keys)

    async def delete_for_role(self, role_id: str) -> None:
        await self.db.execute(
            delete(RolePermission).where(RolePermission.role_id == role_id)
        )
