"""Tests for bearer token handling."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import JWTError, jwt

from vidshare.auth.security import create_access_token, decode_access_token
from vidshare.config.settings import get_settings


class TestAccessTokens:
    def test_round_trip_subject(self) -> None:
        channel_id = uuid4()
        payload = decode_access_token(create_access_token(str(channel_id)))
        assert payload["sub"] == str(channel_id)
        assert payload["type"] == "access"

    def test_extra_claims_kept(self) -> None:
        token = create_access_token(str(uuid4()), username="someone")
        assert decode_access_token(token)["username"] == "someone"

    def test_expired_token_rejected(self) -> None:
        token = create_access_token(str(uuid4()), expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_wrong_type_rejected(self) -> None:
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid4()), "type": "refresh"},
            settings.auth_secret_key,
            algorithm=settings.auth_algorithm,
        )
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_missing_subject_rejected(self) -> None:
        settings = get_settings()
        token = jwt.encode(
            {"type": "access"},
            settings.auth_secret_key,
            algorithm=settings.auth_algorithm,
        )
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_foreign_signature_rejected(self) -> None:
        token = jwt.encode(
            {"sub": str(uuid4()), "type": "access"},
            "another-secret-that-is-long-enough-123",
            algorithm="HS256",
        )
        with pytest.raises(JWTError):
            decode_access_token(token)
