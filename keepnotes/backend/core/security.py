"""
Security Utilities.

Password hashing and session-token helpers. Every function takes its
settings explicitly; nothing here reads configuration.
"""

import secrets
from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from keepnotes.backend.core.config import AuthSettings
from keepnotes.backend.core.exceptions import AuthenticationError
from keepnotes.backend.core.logging import get_logger
from keepnotes.backend.core.utils import utc_now

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password using bcrypt with a fresh salt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash in constant time."""
    password_bytes = plain_password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))


def create_access_token(
    user_id: str,
    auth: AuthSettings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token for a user.

    Args:
        user_id: Identifier stored in the "sub" claim
        auth: Secret, algorithm and default lifetime
        expires_delta: Optional custom lifetime

    Returns:
        Encoded JWT
    """
    lifetime = expires_delta or timedelta(days=auth.token_expire_days)
    now = utc_now()
    claims: dict[str, Any] = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(claims, auth.jwt_secret, algorithm=auth.jwt_algorithm)


def decode_access_token(token: str, auth: AuthSettings) -> str:
    """
    Verify a session token's signature and expiry.

    Args:
        token: JWT string
        auth: Secret and algorithm used for signing

    Returns:
        The user id from the "sub" claim

    Raises:
        AuthenticationError: If the token is invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, auth.jwt_secret, algorithms=[auth.jwt_algorithm])
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("sub")
    if payload.get("type") != "access" or not isinstance(user_id, str) or not user_id:
        logger.warning("Token missing access claims")
        raise AuthenticationError("Invalid or expired token")
    return user_id


def generate_jwt_secret(num_bytes: int = 64) -> str:
    """Generate a random hex secret suitable for JWT_SECRET."""
    return secrets.token_hex(num_bytes)
