"""Tests for the in-process permission cache (TTL, invalidation)."""

import pytest

from app.infrastructure.cache import PermissionCache


def test_miss_returns_none(permission_cache: PermissionCache) -> None:
    assert permission_cache.get("u1") is None


def test_set_then_get_returns_frozen_keys(permission_cache: PermissionCache) -> None:
    stored = permission_cache.set("u1", ["a", "a.b"])
    assert stored == frozenset({"a", "a.b"})
    assert permission_cache.get("u1") == stored
    assert "u1" in permission_cache
    assert len(permission_cache) == 1


def test_entry_expires_after_ttl(permission_cache: PermissionCache, clock) -> None:
    """Entries are live strictly before populated_at + ttl."""
    permission_cache.set("u1", ["a"])
    clock.advance(59)
    assert permission_cache.get("u1") == frozenset({"a"})
    clock.advance(1)
    assert permission_cache.get("u1") is None
    assert "u1" not in permission_cache


def test_reading_does_not_extend_ttl(permission_cache: PermissionCache, clock) -> None:
    permission_cache.set("u1", ["a"])
    clock.advance(30)
    assert permission_cache.get("u1") is not None
    clock.advance(30)
    assert permission_cache.get("u1") is None


def test_empty_set_is_cached(permission_cache: PermissionCache) -> None:
    """An empty grant set is a real answer, not a miss."""
    permission_cache.set("u1", [])
    assert permission_cache.get("u1") == frozenset()


def test_invalidate_one_user(permission_cache: PermissionCache) -> None:
    permission_cache.set("u1", ["a"])
    permission_cache.set("u2", ["b"])
    permission_cache.invalidate("u1")
    permission_cache.invalidate("missing")
    assert permission_cache.get("u1") is None
    assert permission_cache.get("u2") == frozenset({"b"})


def test_invalidate_all(permission_cache: PermissionCache) -> None:
    permission_cache.set("u1", ["a"])
    permission_cache.set("u2", ["b"])
    permission_cache.invalidate_all()
    assert len(permission_cache) == 0


def test_non_positive_ttl_rejected() -> None:
    with pytest.raises(ValueError):
        PermissionCache(ttl_seconds=0)
