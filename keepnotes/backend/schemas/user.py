"""
User and Authentication Schemas.

Request bodies for the account flow and the user shapes returned by it.
No schema here has a password field on the response side.
"""

import re
from datetime import datetime
from typing import Annotated

from pydantic import (
    AfterValidator,
    EmailStr,
    Field,
    StringConstraints,
    model_validator,
)

from keepnotes.backend.core.security import BCRYPT_MAX_BYTES
from keepnotes.backend.schemas.base import CamelModel
from keepnotes.backend.schemas.note import NoteStatistics, NoteSummary

_STRENGTH_PATTERN = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_password_strength(password: str) -> str:
    """At least 8 characters with an uppercase letter, a lowercase letter and a digit."""
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")
    if not _STRENGTH_PATTERN.match(password):
        raise ValueError(
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number"
        )
    return password


PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
Email = Annotated[EmailStr, AfterValidator(normalize_email)]
StrongPassword = Annotated[str, AfterValidator(check_password_strength)]


# =============================================================================
# Requests
# =============================================================================


class RegisterRequest(CamelModel):
    first_name: PersonName
    last_name: PersonName
    email: Email
    password: StrongPassword


class LoginRequest(CamelModel):
    email: Email
    password: str = Field(min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: Email


class ProfileUpdate(CamelModel):
    """Profile changes. Omitted or null fields are left untouched."""

    first_name: PersonName | None = None
    last_name: PersonName | None = None
    email: Email | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: StrongPassword
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.confirm_password != self.new_password:
            raise ValueError("Password confirmation does not match new password")
        return self


# =============================================================================
# Responses
# =============================================================================


class UserSummary(CamelModel):
    """User shape returned alongside a session token."""

    id: str
    first_name: str
    last_name: str
    email: str
    full_name: str
    created_at: datetime
    last_login: datetime | None = None


class UserProfile(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    full_name: str
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


class AuthResult(CamelModel):
    token: str
    user: UserSummary


class DashboardUser(CamelModel):
    id: str
    full_name: str
    email: str
    last_login: datetime | None = None


class DashboardStatistics(NoteStatistics):
    today_activity: int = 0


class Dashboard(CamelModel):
    user: DashboardUser
    statistics: DashboardStatistics
    recent_notes: list[NoteSummary]
    pinned_notes: list[NoteSummary]
