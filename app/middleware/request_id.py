"""Request ID middleware.

Forwards a sane client X-Request-ID or generates one, exposes it to logging
through request_id_var, and echoes it on the response.
Raw ASGI (no BaseHTTPMiddleware) so streaming responses are untouched.
"""

import re
from typing import Callable

from app.shared.telemetry.logging import request_id_var
from app.shared.utils.generators import generate_request_id

# Client values end up in log lines: alphanumeric, hyphen, underscore only.
REQUEST_ID_MAX_LENGTH = 64
_REQUEST_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _header_value(scope: dict, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Return raw (stripped) if it is a safe id, else a fresh one."""
    candidate = raw.strip() if raw else ""
    if _REQUEST_ID_RE.match(candidate):
        return candidate
    return generate_request_id()


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Wrap app so each HTTP request has a request id in scope state, logs, and response."""
    header_key = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(_header_value(scope, header_key))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_name.encode(), request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)

    return asgi_app
