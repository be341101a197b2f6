"""Application DTOs (no ORM dependency)."""

from app.application.dtos.identity import CallerIdentity
from app.application.dtos.role import (
    RoleDetailResult,
    RolePermissionsSetResult,
    RoleResult,
    SeedResult,
)
from app.application.dtos.user import RoleAssignment, UserResult

__all__ = [
    "CallerIdentity",
    "RoleAssignment",
    "RoleDetailResult",
    "RolePermissionsSetResult",
    "RoleResult",
    "SeedResult",
    "UserResult",
]
