"""Authorization and role-administration dependencies (composition root)."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.access import get_requirements
from app.application.dtos.identity import CallerIdentity
from app.application.services.authorization_service import AuthorizationService
from app.application.services.permission_resolution import PermissionResolutionService
from app.application.services.role_service import RoleQueryService, RoleService
from app.application.services.user_role_service import UserRoleService
from app.infrastructure.persistence.database import get_db_transactional
from app.infrastructure.persistence.post_commit import PostCommitInvalidator
from app.infrastructure.persistence.repositories import (
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
)

from .auth import get_current_identity_optional
from .db import (
    get_role_permission_repo,
    get_role_permission_repo_for_write,
    get_role_repo,
    get_role_repo_for_write,
    get_user_repo,
    get_user_repo_for_write,
)


async def get_authorization_service(
    request: Request,
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
    role_permission_repo: Annotated[
        RolePermissionRepository, Depends(get_role_permission_repo)
    ],
) -> AuthorizationService:
    """Build AuthorizationService over the process-wide cache.

    Cache and optional invalidation publisher are set in app lifespan
    (app.state.permission_cache, app.state.permission_publisher).
    """
    resolver = PermissionResolutionService(user_repo, role_permission_repo)
    return AuthorizationService(
        permission_resolver=resolver,
        cache=request.app.state.permission_cache,
        publisher=getattr(request.app.state, "permission_publisher", None),
    )


def authorize(operation: str) -> Callable[..., Awaitable[CallerIdentity | None]]:
    """Dependency factory: run the guard chain for a registered operation.

    Requirements are resolved once, here; an unregistered operation raises
    KeyError when the route module is imported. DENY becomes a generic 403.
    """
    requirements = get_requirements(operation)

    async def _authorize(
        identity: Annotated[
            CallerIdentity | None, Depends(get_current_identity_optional)
        ],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> CallerIdentity | None:
        await auth_svc.require(identity, requirements)
        return identity

    return _authorize


def get_role_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    role_repo: Annotated[RoleRepository, Depends(get_role_repo_for_write)],
    role_permission_repo: Annotated[
        RolePermissionRepository, Depends(get_role_permission_repo_for_write)
    ],
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> RoleService:
    """Role service for role CRUD, grants, and seeding (composition root).

    Cache invalidation is deferred until the request transaction commits.
    """
    return RoleService(
        role_repo=role_repo,
        role_permission_repo=role_permission_repo,
        user_repo=user_repo,
        invalidator=PostCommitInvalidator(db, auth_svc),
    )


def get_role_query_service(
    role_repo: Annotated[RoleRepository, Depends(get_role_repo)],
) -> RoleQueryService:
    """Read-only role queries (list, get) on the read session."""
    return RoleQueryService(role_repo)


def get_user_role_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
    role_repo: Annotated[RoleRepository, Depends(get_role_repo_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> UserRoleService:
    """User role assignment service (composition root)."""
    return UserRoleService(
        user_repo=user_repo,
        role_repo=role_repo,
        invalidator=PostCommitInvalidator(db, auth_svc),
    )
