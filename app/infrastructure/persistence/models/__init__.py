"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    IdentifiedModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.role_permission import RolePermission
from app.infrastructure.persistence.models.user import User

__all__ = [
    "CuidMixin",
    "IdentifiedModel",
    "Role",
    "RolePermission",
    "TimestampMixin",
    "User",
]
