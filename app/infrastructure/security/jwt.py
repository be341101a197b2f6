"""JWT verification (and issuing, for tooling and tests).

Tokens are HS256-signed by the upstream auth service with the shared
SECRET_KEY. Only ``sub`` (user id) is trusted; role claims are ignored and
re-read from the database so role changes apply without re-login.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.shared.utils.datetime import utc_now


def create_access_token(
    subject: str,
    extra_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for subject.

    Args:
        subject: User id, stored as ``sub``.
        extra_claims: Optional additional claims.
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.
    """
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims: dict[str, Any] = dict(extra_claims or {})
    claims["sub"] = subject
    claims["exp"] = utc_now() + ttl
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry; return the claims.

    Raises:
        ValueError: invalid signature, expired, or missing exp/sub.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
