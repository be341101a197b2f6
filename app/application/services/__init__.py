"""Application services: permission resolution, authorization, role administration."""

from app.application.services.authorization_service import (
    AuthorizationService,
    RouteRequirements,
)
from app.application.services.permission_resolution import PermissionResolutionService
from app.application.services.role_service import RoleQueryService, RoleService
from app.application.services.user_role_service import UserRoleService

__all__ = [
    "AuthorizationService",
    "PermissionResolutionService",
    "RoleQueryService",
    "RoleService",
    "RouteRequirements",
    "UserRoleService",
]
