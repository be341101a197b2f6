"""Authorization service: the two-stage guard chain with cached permission lookup.

Stage 1 (legacy-role pre-guard) only looks at declared role names and the
caller's legacy role; a caller with a granular role always passes it.
Stage 2 (permission guard) checks declared permission keys against the
caller's resolved set, enforcing the hierarchical grant rule.

Decisions are values (AccessDecision), never exceptions; require() is the
single place that turns DENY into AuthorizationException.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from app.application.dtos.identity import CallerIdentity
from app.application.interfaces.services import (
    IInvalidationPublisher,
    IPermissionCache,
    IPermissionResolver,
)
from app.domain.enums import AccessDecision
from app.domain.exceptions import AuthorizationException
from app.domain.permission_registry import get_ancestor_keys

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteRequirements:
    """Requirements declared for one operation. Either or both may be empty."""

    required_permissions: tuple[str, ...] = ()
    required_roles: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.required_permissions and not self.required_roles


OPEN = RouteRequirements()


def holds_permission(granted: frozenset[str] | set[str], key: str) -> bool:
    """Return True if key and every ancestor of key are granted."""
    if key not in granted:
        return False
    return all(ancestor in granted for ancestor in get_ancestor_keys(key))


def _legacy_role_matches(role: str, declared: Iterable[str]) -> bool:
    if not role:
        return False
    wanted = role.upper()
    return any(name.upper() == wanted for name in declared)


def legacy_role_pre_guard(
    identity: CallerIdentity | None, requirements: RouteRequirements
) -> bool:
    """Stage 1: legacy @Roles check.

    Callers with a granular role_id always pass; the permission stage decides.
    """
    if not requirements.required_roles:
        return True
    if identity is None:
        return False
    if identity.role_id:
        return True
    return _legacy_role_matches(identity.role, requirements.required_roles)


def permission_guard(
    identity: CallerIdentity | None,
    requirements: RouteRequirements,
    granted: frozenset[str],
) -> bool:
    """Stage 2: permission keys, falling back to legacy roles.

    Permissions declared: allow iff at least one required key is held together
    with all of its ancestors. Only roles declared: granular-role callers pass
    (they were deferred by stage 1), legacy callers must match a declared role.
    """
    if requirements.is_empty:
        return True
    if identity is None:
        return False
    if requirements.required_permissions:
        return any(
            holds_permission(granted, key) for key in requirements.required_permissions
        )
    if identity.role_id:
        return True
    return _legacy_role_matches(identity.role, requirements.required_roles)


class AuthorizationService:
    """Runs the guard chain; reads permission sets through the per-process cache."""

    def __init__(
        self,
        permission_resolver: IPermissionResolver,
        cache: IPermissionCache,
        publisher: IInvalidationPublisher | None = None,
    ) -> None:
        self.permission_resolver = permission_resolver
        self.cache = cache
        self.publisher = publisher

    async def get_user_permissions(self, user_id: str) -> frozenset[str]:
        """Return the user's granted keys: live cache entry, else resolve and cache."""
        cached = self.cache.get(user_id)
        if cached is not None:
            return cached
        permissions = await self.permission_resolver.resolve(user_id)
        return self.cache.set(user_id, permissions)

    async def authorize(
        self,
        identity: CallerIdentity | None,
        requirements: RouteRequirements,
    ) -> AccessDecision:
        """Return ALLOW or DENY for identity against requirements."""
        if requirements.is_empty:
            return AccessDecision.ALLOW
        if identity is None:
            logger.debug("Access denied: unauthenticated caller")
            return AccessDecision.DENY
        if not legacy_role_pre_guard(identity, requirements):
            logger.debug("Access denied by legacy role guard for user %s", identity.id)
            return AccessDecision.DENY

        granted: frozenset[str] = frozenset()
        if requirements.required_permissions:
            granted = await self.get_user_permissions(identity.id)
        if not permission_guard(identity, requirements, granted):
            logger.debug("Access denied by permission guard for user %s", identity.id)
            return AccessDecision.DENY
        return AccessDecision.ALLOW

    async def require(
        self,
        identity: CallerIdentity | None,
        requirements: RouteRequirements,
    ) -> None:
        """Raise AuthorizationException unless authorize() allows."""
        decision = await self.authorize(identity, requirements)
        if not decision.allowed:
            raise AuthorizationException()

    async def invalidate_user(self, user_id: str) -> None:
        """Drop one user's cached permissions here and on other instances."""
        self.cache.invalidate(user_id)
        if self.publisher is not None:
            await self.publisher.publish_user(user_id)

    async def invalidate_all(self) -> None:
        """Drop every cached permission set here and on other instances."""
        self.cache.invalidate_all()
        if self.publisher is not None:
            await self.publisher.publish_all()
