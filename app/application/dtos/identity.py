"""Caller identity attached to a request by the authentication layer."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CallerIdentity:
    """Who is calling: user id, legacy role name, and optional granular role id.

    The guard chain only reads these three fields.
    """

    id: str
    role: str = ""
    role_id: str | None = None

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "CallerIdentity | None":
        """Build from a claims/user mapping ({id or sub, role, roleId?}).

        Returns None when neither id nor sub is present.
        """
        user_id = claims.get("id") or claims.get("sub")
        if not user_id:
            return None
        role_id = claims.get("role_id", claims.get("roleId"))
        return cls(
            id=str(user_id),
            role=str(claims.get("role") or ""),
            role_id=str(role_id) if role_id else None,
        )
