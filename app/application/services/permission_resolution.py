"""Permission resolution: user -> authoritative set of granted permission keys."""

from __future__ import annotations

import logging

from app.application.interfaces.repositories import (
    IRolePermissionRepository,
    IUserRepository,
)
from app.core.constants import ADMIN_ROLE_SLUG
from app.domain.enums import LegacyRole
from app.domain.permission_registry import get_all_permission_keys

logger = logging.getLogger(__name__)


class PermissionResolutionService:
    """Resolves a user's effective permission keys from the two role models.

    - Granular role with slug ``admin``, or legacy ADMIN without a granular
      role: the whole registry.
    - Granular role: exactly the keys granted to that role (stored grants are
      not expanded; the hierarchy is enforced at check time).
    - Legacy non-admin role without a granular role, or unknown user: empty.

    Missing users or roles never raise; storage errors propagate.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        role_permission_repo: IRolePermissionRepository,
    ) -> None:
        self._user_repo = user_repo
        self._role_permission_repo = role_permission_repo

    async def resolve(self, user_id: str) -> frozenset[str]:
        """Return the granted permission keys for user_id."""
        assignment = await self._user_repo.get_role_assignment(user_id)
        if assignment is None:
            logger.debug("Permission resolution: unknown user %s", user_id)
            return frozenset()

        if assignment.role_slug == ADMIN_ROLE_SLUG or (
            not assignment.role_id and assignment.role == LegacyRole.ADMIN.value
        ):
            return get_all_permission_keys()

        if assignment.role_id:
            keys = await self._role_permission_repo.get_permission_keys(
                assignment.role_id
            )
            return frozenset(keys)

        return frozenset()
