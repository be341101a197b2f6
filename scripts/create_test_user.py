"""Create a user with a legacy role and print a bearer token for it.

Usage:
    python -m scripts.create_test_user <email> [LEGACY_ROLE]
LEGACY_ROLE defaults to VIEWER. Requires DATABASE_URL. All imports use app.*.
"""

import asyncio
import sys

from app.domain.enums import LegacyRole
from app.infrastructure.persistence import database
from app.infrastructure.persistence.models import User
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security import create_access_token


async def main() -> None:
    """Create the user and print its id and an access token."""
    if len(sys.argv) < 2:
        print(
            "Usage: python -m scripts.create_test_user <email> [LEGACY_ROLE]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    role = sys.argv[2].upper() if len(sys.argv) > 2 else LegacyRole.VIEWER.value
    if role not in LegacyRole.values():
        print(f"Unknown role {role}; one of {', '.join(LegacyRole.values())}", file=sys.stderr)
        sys.exit(1)

    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("DATABASE_URL is not configured", file=sys.stderr)
        sys.exit(1)

    try:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                user = await UserRepository(session).create(
                    User(email=email, name=email.split("@", 1)[0], role=role)
                )
        print(f"Created user: {user.id} ({email}, {role})")
        print(f"Token: {create_access_token(user.id)}")
    finally:
        await database.dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
