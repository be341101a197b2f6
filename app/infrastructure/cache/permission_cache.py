"""In-process permission cache: user_id -> (granted keys, expiry).

One instance per process, created in the app lifespan and passed to the
authorization service. The clock is injectable so tests control expiry.

No lock: the app runs on a single event loop and get/set/invalidate never
await. Two concurrent misses for the same user both resolve from the
database and the last set wins; both read the same rows, so nothing is lost.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from app.core.constants import PERMISSION_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


class PermissionCache:
    """Fixed-TTL map of user id to frozen permission-key set."""

    def __init__(
        self,
        ttl_seconds: float = PERMISSION_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[frozenset[str], float]] = {}

    def get(self, user_id: str) -> frozenset[str] | None:
        """Return cached keys if the entry is still live; drop it if expired."""
        entry = self._entries.get(user_id)
        if entry is None:
            logger.debug("Permission cache MISS: %s", user_id)
            return None
        keys, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[user_id]
            logger.debug("Permission cache EXPIRED: %s", user_id)
            return None
        logger.debug("Permission cache HIT: %s", user_id)
        return keys

    def set(self, user_id: str, keys: Iterable[str]) -> frozenset[str]:
        """Store keys for user_id with a TTL measured from now."""
        frozen = keys if isinstance(keys, frozenset) else frozenset(keys)
        self._entries[user_id] = (frozen, self._clock() + self.ttl_seconds)
        return frozen

    def invalidate(self, user_id: str) -> None:
        """Remove one user's entry (no-op if absent)."""
        if self._entries.pop(user_id, None) is not None:
            logger.debug("Permission cache invalidated for user %s", user_id)

    def invalidate_all(self) -> None:
        """Remove every entry."""
        count = len(self._entries)
        self._entries.clear()
        logger.info("Permission cache cleared (%d entries)", count)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._entries
