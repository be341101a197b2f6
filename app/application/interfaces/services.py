"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol


class IPermissionCache(Protocol):
    """Per-process user -> granted-keys cache with a fixed TTL."""

    def get(self, user_id: str) -> frozenset[str] | None:
        """Return live cached keys, or None on miss/expiry."""
        ...

    def set(self, user_id: str, keys: Iterable[str]) -> frozenset[str]:
        """Store keys with a fresh TTL; return the stored set."""
        ...

    def invalidate(self, user_id: str) -> None:
        ...

    def invalidate_all(self) -> None:
        ...


class IInvalidationPublisher(Protocol):
    """Broadcasts cache invalidations to other running instances."""

    async def publish_user(self, user_id: str) -> bool:
        ...

    async def publish_all(self) -> bool:
        ...


class IPermissionResolver(Protocol):
    """Computes the authoritative permission-key set for a user."""

    async def resolve(self, user_id: str) -> frozenset[str]:
        ...


class IPermissionInvalidator(Protocol):
    """Clears cached permission sets after role or assignment writes."""

    async def invalidate_user(self, user_id: str) -> None:
        ...

    async def invalidate_all(self) -> None:
        ...
