"""User role assignment: change a user's legacy role and/or granular role."""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import IRoleRepository, IUserRepository
from app.application.interfaces.services import IPermissionInvalidator
from app.domain.enums import LegacyRole
from app.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)


class UserRoleService:
    """Writes role / role_id on a user and drops that user's cached permissions."""

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        invalidator: IPermissionInvalidator,
    ) -> None:
        self._user_repo = user_repo
        self._role_repo = role_repo
        self._invalidator = invalidator

    async def update_user_role(
        self, user_id: str, changes: dict[str, Any]
    ) -> UserResult:
        """Apply changes containing ``role`` and/or ``role_id``.

        ``role_id: None`` clears the granular role; an absent key leaves it.

        Raises:
            ValidationException: no field given, or unknown legacy role.
            ResourceNotFoundException: unknown user or role_id.
        """
        data: dict[str, Any] = {}
        if changes.get("role") is not None:
            role = str(changes["role"]).upper()
            if role not in LegacyRole.values():
                raise ValidationException(f"Unknown role: {changes['role']}", "role")
            data["role"] = role
        if "role_id" in changes:
            role_id = changes["role_id"]
            if role_id is not None and await self._role_repo.get_role(role_id) is None:
                raise ResourceNotFoundException("role", role_id)
            data["role_id"] = role_id
        if not data:
            raise ValidationException("Provide role and/or role_id", "role")

        updated = await self._user_repo.update_role(user_id, data)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        logger.info(
            "User %s role updated (role=%s, role_id=%s)",
            user_id,
            updated.role,
            updated.role_id,
        )
        await self._invalidator.invalidate_user(user_id)
        return updated
