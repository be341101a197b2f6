"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model (authentication lookup, role change result)."""

    id: str
    email: str
    name: str
    role: str
    role_id: str | None
    is_active: bool


@dataclass(frozen=True)
class RoleAssignment:
    """A user's role assignment as needed for permission resolution.

    role_slug / role_is_system are None when role_id is unset or the role row
    no longer exists.
    """

    user_id: str
    role: str | None
    role_id: str | None
    role_slug: str | None = None
    role_is_system: bool | None = None
