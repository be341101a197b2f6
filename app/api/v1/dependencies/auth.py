"""Caller identity dependencies: bearer JWT -> CallerIdentity.

Authentication (login, token issue) happens upstream; this module only
verifies the token and loads the user's current role assignment so that a
role change takes effect without re-login.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.identity import CallerIdentity
from app.domain.exceptions import AuthenticationException
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security.jwt import verify_token

from .db import get_user_repo

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_identity_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> CallerIdentity | None:
    """Return the caller from a valid JWT for an existing active user; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        logger.debug("Rejected bearer token: %s", e)
        return None
    user = await user_repo.get_user(str(payload["sub"]))
    if user is None or not user.is_active:
        return None
    return CallerIdentity(id=user.id, role=user.role, role_id=user.role_id)


async def get_current_identity(
    identity: Annotated[CallerIdentity | None, Depends(get_current_identity_optional)],
) -> CallerIdentity:
    """Return the caller; raise 401 if missing or invalid."""
    if identity is None:
        raise AuthenticationException("Not authenticated")
    return identity
