"""API v1 dependencies (composition root). Routes import from here only."""

from .auth import get_current_identity, get_current_identity_optional
from .db import (
    get_role_permission_repo,
    get_role_repo,
    get_user_repo,
)
from .user_rbac import (
    authorize,
    get_authorization_service,
    get_role_query_service,
    get_role_service,
    get_user_role_service,
)

__all__ = [
    "authorize",
    "get_authorization_service",
    "get_current_identity",
    "get_current_identity_optional",
    "get_role_permission_repo",
    "get_role_query_service",
    "get_role_repo",
    "get_role_service",
    "get_user_repo",
    "get_user_role_service",
]
