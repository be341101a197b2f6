"""Route requirement table: operation name -> declared permissions / roles.

Requirements are declared here, at registration time, and looked up by the
``authorize(operation)`` dependency on every request. An operation missing
from the table is a programming error and fails at import of the router.
"""

from types import MappingProxyType

from app.application.services.authorization_service import RouteRequirements
from app.domain.enums import LegacyRole

_ADMIN = (LegacyRole.ADMIN.value,)

ROUTE_REQUIREMENTS: MappingProxyType[str, RouteRequirements] = MappingProxyType(
    {
        "roles.list": RouteRequirements(("users.roles",), _ADMIN),
        "roles.get": RouteRequirements(("users.roles",), _ADMIN),
        "roles.create": RouteRequirements(("users.roles.addButton",), _ADMIN),
        "roles.update": RouteRequirements(("users.roles.editButton",), _ADMIN),
        "roles.delete": RouteRequirements(("users.roles.deleteButton",), _ADMIN),
        "roles.set_permissions": RouteRequirements(
            ("users.roles.editPermissions",), _ADMIN
        ),
        "roles.seed": RouteRequirements(required_roles=_ADMIN),
        "users.update_role": RouteRequirements(("users.table.changeRole",), _ADMIN),
    }
)


def get_requirements(operation: str) -> RouteRequirements:
    """Return the declared requirements for operation.

    Raises:
        KeyError: operation is not registered.
    """
    try:
        return ROUTE_REQUIREMENTS[operation]
    except KeyError:
        raise KeyError(f"No route requirements registered for {operation!r}") from None
