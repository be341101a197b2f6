"""Domain layer: permission registry, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import AccessDecision, LegacyRole
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DispatchException,
    InvalidPermissionKeysException,
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    RoleInUseException,
    SqlNotConfiguredException,
    SystemRoleProtectedException,
    ValidationException,
)

__all__ = [
    # Enums
    "AccessDecision",
    "LegacyRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "DispatchException",
    "InvalidPermissionKeysException",
    "ResourceNotFoundException",
    "RoleAlreadyExistsException",
    "RoleInUseException",
    "SqlNotConfiguredException",
    "SystemRoleProtectedException",
    "ValidationException",
]
