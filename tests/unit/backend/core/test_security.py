"""
Unit Tests for Security Module.

Black box tests against the public interface of security.py.
All cryptographic operations (bcrypt, JWT) execute for real.
"""

from datetime import timedelta

import pytest
from jose import jwt

from keepnotes.backend.core.config import AuthSettings
from keepnotes.backend.core.exceptions import AuthenticationError
from keepnotes.backend.core.security import (
    BCRYPT_MAX_BYTES,
    create_access_token,
    decode_access_token,
    generate_jwt_secret,
    hash_password,
    verify_password,
)

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-testing-purposes"


@pytest.fixture
def auth():
    return AuthSettings(jwt_secret=TEST_JWT_SECRET, bcrypt_rounds=4)


# =============================================================================
# Password Hashing
# =============================================================================


class TestHashPassword:
    """Tests for password hashing - no mocks, pure black box."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("Secret123", rounds=4)

        assert hashed != "Secret123"
        assert hashed.startswith("$2")

    def test_same_password_gets_fresh_salt(self):
        assert hash_password("Secret123", rounds=4) != hash_password("Secret123", rounds=4)

    def test_rounds_are_encoded_in_hash(self):
        assert hash_password("Secret123", rounds=5).startswith("$2b$05$")


class TestVerifyPassword:
    """Tests for password verification."""

    def test_correct_password(self):
        hashed = hash_password("Secret123", rounds=4)

        assert verify_password("Secret123", hashed) is True

    def test_wrong_password(self):
        hashed = hash_password("Secret123", rounds=4)

        assert verify_password("Secret124", hashed) is False

    def test_over_limit_password_never_verifies(self):
        """A password past bcrypt's input limit must not match its truncated prefix."""
        prefix = "A" * BCRYPT_MAX_BYTES
        hashed = hash_password(prefix, rounds=4)

        assert verify_password(prefix + "extra", hashed) is False

    def test_unicode_password(self):
        hashed = hash_password("Pässwörd1", rounds=4)

        assert verify_password("Pässwörd1", hashed) is True


# =============================================================================
# Session Tokens
# =============================================================================


class TestAccessTokens:
    """Tests for token creation and verification."""

    def test_round_trip(self, auth):
        token = create_access_token("user-123", auth)

        assert decode_access_token(token, auth) == "user-123"

    def test_claims(self, auth):
        token = create_access_token("user-123", auth)
        claims = jwt.get_unverified_claims(token)

        assert claims["sub"] == "user-123"
        assert claims["type"] == "access"
        assert claims["exp"] - claims["iat"] == 30 * 24 * 3600

    def test_configured_lifetime(self):
        auth = AuthSettings(jwt_secret=TEST_JWT_SECRET, token_expire_days=2)
        claims = jwt.get_unverified_claims(create_access_token("u", auth))

        assert claims["exp"] - claims["iat"] == 2 * 24 * 3600

    def test_expired_token_rejected(self, auth):
        token = create_access_token("user-123", auth, expires_delta=timedelta(seconds=-10))

        with pytest.raises(AuthenticationError):
            decode_access_token(token, auth)

    def test_wrong_secret_rejected(self, auth):
        other = AuthSettings(jwt_secret="another-secret-key-of-reasonable-length")
        token = create_access_token("user-123", other)

        with pytest.raises(AuthenticationError):
            decode_access_token(token, auth)

    def test_malformed_token_rejected(self, auth):
        with pytest.raises(AuthenticationError):
            decode_access_token("not-a-jwt", auth)

    def test_token_without_access_type_rejected(self, auth):
        token = jwt.encode({"sub": "user-123"}, TEST_JWT_SECRET, algorithm="HS256")

        with pytest.raises(AuthenticationError):
            decode_access_token(token, auth)

    def test_token_without_subject_rejected(self, auth):
        token = jwt.encode({"type": "access"}, TEST_JWT_SECRET, algorithm="HS256")

        with pytest.raises(AuthenticationError):
            decode_access_token(token, auth)


class TestGenerateJwtSecret:
    def test_length_and_uniqueness(self):
        first = generate_jwt_secret()

        assert len(first) == 128
        assert first != generate_jwt_secret()
