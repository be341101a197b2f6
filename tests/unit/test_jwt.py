"""Tests for bearer token verification."""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import get_settings
from app.infrastructure.security import create_access_token, verify_token


def test_round_trip_returns_subject() -> None:
    token = create_access_token("u1", {"role": "ADMIN"})
    claims = verify_token(token)
    assert claims["sub"] == "u1"
    assert claims["role"] == "ADMIN"


def test_expired_token_rejected() -> None:
    token = create_access_token("u1", expires_delta=timedelta(seconds=-5))
    with pytest.raises(ValueError):
        verify_token(token)


def test_wrong_signature_rejected() -> None:
    settings = get_settings()
    token = jwt.encode({"sub": "u1", "exp": 4102444800}, "other-key", algorithm=settings.algorithm)
    with pytest.raises(ValueError):
        verify_token(token)


def test_token_without_sub_rejected() -> None:
    settings = get_settings()
    token = jwt.encode(
        {"exp": 4102444800},
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    with pytest.raises(ValueError):
        verify_token(token)
