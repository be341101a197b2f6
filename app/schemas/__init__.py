"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.permission import (
    MyPermissionsResponse,
    PermissionNode,
    PermissionRegistryResponse,
)
from app.schemas.role import (
    RoleCreateRequest,
    RoleDetailResponse,
    RolePermissionsSetRequest,
    RolePermissionsSetResponse,
    RoleResponse,
    RoleUpdate,
    SeedResponse,
)
from app.schemas.user import UserResponse, UserRoleUpdate

__all__ = [
    "HealthResponse",
    "MyPermissionsResponse",
    "PermissionNode",
    "PermissionRegistryResponse",
    "ReadinessResponse",
    "RoleCreateRequest",
    "RoleDetailResponse",
    "RolePermissionsSetRequest",
    "RolePermissionsSetResponse",
    "RoleResponse",
    "RoleUpdate",
    "SeedResponse",
    "UserResponse",
    "UserRoleUpdate",
]
