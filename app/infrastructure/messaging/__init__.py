"""Messaging: Redis pub/sub for cross-instance permission cache invalidation."""

from app.infrastructure.messaging.redis_pubsub import (
    InvalidationMessage,
    PermissionInvalidationPublisher,
    apply_invalidation,
    run_permission_invalidation_listener,
)

__all__ = [
    "InvalidationMessage",
    "PermissionInvalidationPublisher",
    "apply_invalidation",
    "run_permission_invalidation_listener",
]
