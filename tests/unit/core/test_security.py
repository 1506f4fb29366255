"""
Unit tests for password hashing and JWT helpers.
"""
from datetime import timedelta

import pytest
from jose import JWTError
from jose.exceptions import ExpiredSignatureError

from dashboard.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_token,
)


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = get_password_hash("Secret123")
        assert hashed.startswith("$argon2")
        assert verify_password("Secret123", hashed)

    def test_wrong_password(self):
        assert not verify_password("Wrong123", get_password_hash("Secret123"))

    def test_malformed_hash(self):
        assert not verify_password("Secret123", "not-a-hash")


class TestTokens:

    def test_access_token_roundtrip(self):
        token = create_access_token({"sub": "user-1"})
        payload = verify_token(token, ACCESS_TOKEN_TYPE)
        assert payload["sub"] == "user-1"
        assert payload["type"] == ACCESS_TOKEN_TYPE

    def test_refresh_token_is_not_an_access_token(self):
        token = create_refresh_token({"sub": "user-1"})
        assert verify_token(token, REFRESH_TOKEN_TYPE)["sub"] == "user-1"
        with pytest.raises(JWTError):
            verify_token(token, ACCESS_TOKEN_TYPE)

    def test_expired_token(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-5))
        with pytest.raises(ExpiredSignatureError):
            verify_token(token, ACCESS_TOKEN_TYPE)

    def test_tampered_token(self):
        token = create_access_token({"sub": "user-1"})
        with pytest.raises(JWTError):
            verify_token(token[:-4] + "abcd", ACCESS_TOKEN_TYPE)
