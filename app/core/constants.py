"""Core constants: role slugs and shared literal values.

Single source of truth for identifiers that several layers compare against
(DRY). Permission keys themselves live in app.domain.permission_registry.
"""

# Granular role slug that always resolves to the full permission registry.
ADMIN_ROLE_SLUG = "admin"

# Default TTL for the per-process permission cache (seconds).
PERMISSION_CACHE_TTL_SECONDS = 60

# Pub/sub payload marker for "clear every cached user".
INVALIDATE_ALL_MARKER = "*"
