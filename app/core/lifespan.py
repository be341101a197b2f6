"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (permission cache, invalidation
broadcast, DB engine dispose).
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.cache import PermissionCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: permission cache, then (if enabled) Redis invalidation
    publisher and listener task. Shutdown order: listener cancel, publisher
    disconnect, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    app.state.permission_cache = PermissionCache(
        ttl_seconds=settings.permission_cache_ttl_seconds
    )
    app.state.permission_publisher = None
    app.state.permission_invalidation_task = None

    if settings.permission_broadcast_enabled:
        from app.infrastructure.messaging.redis_pubsub import (
            PermissionInvalidationPublisher,
            run_permission_invalidation_listener,
        )

        publisher = PermissionInvalidationPublisher()
        await publisher.connect()
        app.state.permission_publisher = publisher
        app.state.permission_invalidation_task = asyncio.create_task(
            run_permission_invalidation_listener(app)
        )
        logger.info("Permission invalidation broadcast enabled")

    yield

    # ---- Shutdown ----
    listener = getattr(app.state, "permission_invalidation_task", None)
    if listener is not None:
        listener.cancel()
        try:
            await listener
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Permission invalidation listener failed")
        logger.info("Permission invalidation listener stopped")

    from app.infrastructure.persistence import database

    try:
        if getattr(app.state, "permission_publisher", None) is not None:
            await app.state.permission_publisher.disconnect()
    finally:
        await database.dispose_engine()
