"""Shared utilities: telemetry (logging) and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.telemetry import get_logger, setup_logging
from app.shared.utils import generate_cuid, generate_request_id, utc_now

__all__ = [
    "generate_cuid",
    "generate_request_id",
    "get_logger",
    "setup_logging",
    "utc_now",
]
