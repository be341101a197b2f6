"""Shared telemetry: logging setup and request-scoped log context."""

from app.shared.telemetry.logging import (
    RequestIDLogFilter,
    get_logger,
    get_request_id,
    request_id_var,
    setup_logging,
)

__all__ = [
    "RequestIDLogFilter",
    "get_logger",
    "get_request_id",
    "request_id_var",
    "setup_logging",
]
