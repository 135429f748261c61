"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from keepnotes.backend.core.config import AuthSettings, get_auth_settings
from keepnotes.backend.core.database import get_db_session
from keepnotes.backend.core.exceptions import AuthenticationError
from keepnotes.backend.core.logging import get_logger
from keepnotes.backend.models.user import User
from keepnotes.backend.services.account import AccountService

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

# Token and hashing settings, overridable in tests
AuthConfig = Annotated[AuthSettings, Depends(get_auth_settings)]

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    db: DbSession,
    auth: AuthConfig,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> User:
    """
    Resolve the bearer token to an active user.

    Raises:
        AuthenticationError: No token, bad token, or inactive account
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")

    user = await AccountService(db, auth).authenticate(credentials.credentials)
    logger.debug("Request authenticated", extra={"user_id": user.id})
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
