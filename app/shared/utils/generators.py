"""ID generators: CUID2 primary keys and request ids."""

from cuid2 import cuid_wrapper

_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2) for primary keys."""
    result = _cuid()
    if not isinstance(result, str):
        raise TypeError(f"Expected str from cuid2, got {type(result).__name__}")
    return result


def generate_request_id() -> str:
    """New request id for requests that arrive without a usable X-Request-ID."""
    return generate_cuid()
