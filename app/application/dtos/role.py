"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RoleResult:
    """Role read-model (list rows, create/update results)."""

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


@dataclass(frozen=True)
class RoleDetailResult(RoleResult):
    """Role with its granted permission keys (GET by id)."""

    permission_keys: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RolePermissionsSetResult:
    """Outcome of a wholesale grant replacement."""

    role_id: str
    permission_count: int


@dataclass(frozen=True)
class SeedResult:
    """Outcome of seeding system roles and migrating legacy users."""

    roles_seeded: int
    users_migrated: int
    message: str = "System roles seeded and users migrated successfully"
