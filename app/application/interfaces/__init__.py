"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
)
from app.application.interfaces.services import (
    IInvalidationPublisher,
    IPermissionCache,
    IPermissionInvalidator,
    IPermissionResolver,
)

__all__ = [
    "IInvalidationPublisher",
    "IPermissionCache",
    "IPermissionInvalidator",
    "IPermissionResolver",
    "IRolePermissionRepository",
    "IRoleRepository",
    "IUserRepository",
]
