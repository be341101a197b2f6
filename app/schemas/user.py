"""User API schemas."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.domain.enums import LegacyRole


class UserRoleUpdate(BaseModel):
    """Request body for PATCH /users/{user_id}/role.

    Send ``role_id: null`` to clear the granular role; omit it to leave it.
    """

    role: LegacyRole | None = None
    role_id: str | None = Field(
        default=None, validation_alias=AliasChoices("role_id", "roleId")
    )

    def to_changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        changes: dict[str, Any] = {}
        if "role" in self.model_fields_set and self.role is not None:
            changes["role"] = self.role.value
        if "role_id" in self.model_fields_set:
            changes["role_id"] = self.role_id
        return changes


class UserResponse(BaseModel):
    """User response with both role assignments."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: str
    role_id: str | None
    is_active: bool
