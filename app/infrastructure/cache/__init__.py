"""Cache: in-process permission cache.

Created once in the app lifespan (app.state.permission_cache) and shared by
every request's AuthorizationService.
"""

from app.infrastructure.cache.permission_cache import PermissionCache

__all__ = ["PermissionCache"]
