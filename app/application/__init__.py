"""Application layer: interfaces, DTOs, services.

Depends only on domain and protocol definitions.
Infrastructure implements the interfaces (repositories, cache, publisher).
"""

from app.application.interfaces import (
    IInvalidationPublisher,
    IPermissionCache,
    IPermissionInvalidator,
    IPermissionResolver,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
)
from app.application.services import (
    AuthorizationService,
    PermissionResolutionService,
    RoleService,
    UserRoleService,
)

__all__ = [
    "AuthorizationService",
    "IInvalidationPublisher",
    "IPermissionCache",
    "IPermissionInvalidator",
    "IPermissionResolver",
    "IRolePermissionRepository",
    "IRoleRepository",
    "IUserRepository",
    "PermissionResolutionService",
    "RoleService",
    "UserRoleService",
]
