"""Seed system roles with default grants and migrate legacy users onto them.

Usage:
    python -m scripts.seed_system_roles
Same operation as POST /api/v1/permissions/seed. Requires DATABASE_URL.
When PERMISSION_BROADCAST_ENABLED is set, running instances are told to drop
their cached permission sets once the seed has committed. All imports use app.*.
"""

import asyncio
import sys

from app.application.services import (
    AuthorizationService,
    PermissionResolutionService,
    RoleService,
)
from app.core.config import get_settings
from app.infrastructure.cache import PermissionCache
from app.infrastructure.persistence import database
from app.infrastructure.persistence.post_commit import (
    PostCommitInvalidator,
    run_after_commit,
)
from app.infrastructure.persistence.repositories import (
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
)


async def main() -> None:
    """Seed system roles in one transaction."""
    settings = get_settings()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("DATABASE_URL is not configured", file=sys.stderr)
        sys.exit(1)

    publisher = None
    if settings.permission_broadcast_enabled:
        from app.infrastructure.messaging import PermissionInvalidationPublisher

        publisher = PermissionInvalidationPublisher()
        await publisher.connect()

    try:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                user_repo = UserRepository(session)
                role_permission_repo = RolePermissionRepository(session)
                auth_svc = AuthorizationService(
                    PermissionResolutionService(user_repo, role_permission_repo),
                    PermissionCache(settings.permission_cache_ttl_seconds),
                    publisher,
                )
                invalidator = PostCommitInvalidator(session, auth_svc)
                result = await RoleService(
                    RoleRepository(session), role_permission_repo, user_repo, invalidator
                ).seed_system_roles()
            await run_after_commit(session)
        print(
            f"{result.message}: {result.roles_seeded} roles, "
            f"{result.users_migrated} users migrated"
        )
    finally:
        if publisher is not None:
            await publisher.disconnect()
        await database.dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
