"""Redis Pub/Sub for permission cache invalidation across instances.

Each process keeps its own PermissionCache. When a role or grant changes,
the instance that made the change clears its own cache and publishes the
invalidation; every instance (itself included) runs a listener that applies
it locally. Without Redis the 60 s TTL is the staleness bound.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict, dataclass
from typing import Any

import redis.asyncio as redis

from app.core.config import get_settings
from app.core.constants import INVALIDATE_ALL_MARKER
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class InvalidationMessage:
    """Invalidation payload: one user id, or INVALIDATE_ALL_MARKER for everyone."""

    user_id: str
    timestamp: str

    @property
    def is_global(self) -> bool:
        return self.user_id == INVALIDATE_ALL_MARKER

    def to_json(self) -> str:
        """Serialize for publish."""
        return json.dumps(asdict(self))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InvalidationMessage:
        """Deserialize from Redis message."""
        return cls(user_id=str(data["user_id"]), timestamp=str(data.get("timestamp", "")))


class _RedisPubSubBase:
    """Shared Redis connection and channel logic for invalidation pub/sub."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize. Pass redis_client for DI/testing."""
        self.redis = redis_client
        self.settings = get_settings()
        self.channel = self.settings.permission_broadcast_channel
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self._connected:
            return
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                )
                await self.redis.ping()
                self._connected = True
                logger.info("Redis pub/sub connected")
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning("Redis pub/sub connection failed: %s", e)
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.close()
            self._connected = False
            logger.info("Redis pub/sub disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected."""
        return self._connected and self.redis is not None


class PermissionInvalidationPublisher(_RedisPubSubBase):
    """Publishes permission cache invalidations. Failures are logged, not raised."""

    async def publish(self, message: InvalidationMessage) -> bool:
        """Publish message on the invalidation channel.

        Returns:
            True if published, False if Redis unavailable or publish failed.
        """
        if not self.is_available() or self.redis is None:
            logger.debug("Redis not available, skipping invalidation publish")
            return False
        try:
            await self.redis.publish(self.channel, message.to_json())
            logger.debug("Published permission invalidation: %s", message.user_id)
        except redis.RedisError:
            logger.exception("Failed to publish permission invalidation")
            return False
        else:
            return True

    async def publish_user(self, user_id: str) -> bool:
        """Publish invalidation of one user's cached permissions."""
        return await self.publish(
            InvalidationMessage(user_id=user_id, timestamp=utc_now().isoformat())
        )

    async def publish_all(self) -> bool:
        """Publish invalidation of every cached permission set."""
        return await self.publish(
            InvalidationMessage(
                user_id=INVALIDATE_ALL_MARKER, timestamp=utc_now().isoformat()
            )
        )


def apply_invalidation(cache: Any, message: InvalidationMessage) -> None:
    """Apply one received invalidation to a local PermissionCache."""
    if message.is_global:
        cache.invalidate_all()
    else:
        cache.invalidate(message.user_id)


async def run_permission_invalidation_listener(
    app: Any, redis_client: redis.Redis | None = None
) -> None:
    """Subscribe to the invalidation channel and apply messages to app.state.permission_cache.

    Call as a background task from lifespan when broadcasting is enabled.
    Cancelling the task stops the loop. A lost connection is logged and ends
    the listener; local caches then fall back to TTL expiry.
    """
    subscriber = _RedisPubSubBase(redis_client)
    await subscriber.connect()
    if not subscriber.is_available() or subscriber.redis is None:
        logger.warning("Redis not available, permission invalidation listener not started")
        return
    pubsub = subscriber.redis.pubsub()
    try:
        await pubsub.subscribe(subscriber.channel)
        logger.info("Subscribed to %s for permission invalidation", subscriber.channel)
        async for raw in pubsub.listen():
            if raw["type"] != "message":
                continue
            try:
                message = InvalidationMessage.from_dict(json.loads(raw["data"]))
            except (json.JSONDecodeError, KeyError, TypeError):
                logger.exception("Failed to parse permission invalidation message")
                continue
            cache = getattr(app.state, "permission_cache", None)
            if cache is not None:
                apply_invalidation(cache, message)
    except asyncio.CancelledError:
        logger.info("Permission invalidation listener cancelled")
    except Exception:
        logger.exception("Permission invalidation listener error")
    finally:
        try:
            await pubsub.unsubscribe(subscriber.channel)
            await pubsub.close()
        except redis.RedisError:
            logger.warning("Permission invalidation pubsub cleanup failed", exc_info=True)
        await subscriber.disconnect()
