"""Role API schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RoleCreateRequest(BaseModel):
    """Request body for creating a role. The slug is derived from name."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class RoleUpdate(BaseModel):
    """Request body for updating a role (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_active: bool | None = Field(
        default=None, validation_alias=AliasChoices("is_active", "isActive")
    )


class RolePermissionsSetRequest(BaseModel):
    """Request body for replacing a role's permission keys."""

    permission_keys: list[str] = Field(
        ...,
        max_length=2000,
        validation_alias=AliasChoices("permission_keys", "permissionKeys"),
    )


class RoleResponse(BaseModel):
    """Role list row / create / update response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: str | None
    is_system: bool
    is_active: bool
    user_count: int = 0
    permission_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleDetailResponse(RoleResponse):
    """Role with its granted permission keys."""

    permission_keys: list[str] = Field(default_factory=list)


class RolePermissionsSetResponse(BaseModel):
    """Response for PUT /roles/{role_id}/permissions."""

    model_config = ConfigDict(from_attributes=True)

    role_id: str
    permission_count: int


class SeedResponse(BaseModel):
    """Response for POST /permissions/seed."""

    model_config = ConfigDict(from_attributes=True)

    message: str
    roles_seeded: int
    users_migrated: int
