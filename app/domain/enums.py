"""Domain enumerations for the dispatch back office.

Enums represent fixed sets of domain values (e.g. legacy user roles).
"""

from enum import Enum


class LegacyRole(str, Enum):
    """Fixed role stored directly on the user record.

    Predates the granular role system. Only ADMIN resolves to permission
    keys; the others gate routes through declared role names.
    """

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    DISPATCHER = "DISPATCHER"
    ACCOUNTANT = "ACCOUNTANT"
    AGENT_MANAGER = "AGENT_MANAGER"
    REP = "REP"
    DRIVER = "DRIVER"
    SUPPLIER = "SUPPLIER"
    VIEWER = "VIEWER"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [role.value for role in cls]


class AccessDecision(str, Enum):
    """Outcome of the guard chain for one request."""

    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is AccessDecision.ALLOW
