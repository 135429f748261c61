"""
User Model.

Account records. Accounts are never physically removed by the application;
deactivation flips the status.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from keepnotes.backend.models.base import Base, TimestampMixin, UUIDMixin


class UserStatus(str, enum.Enum):
    """Lifecycle status of an account."""

    ACTIVE = "active"
    DEACTIVATED = "deactivated"


class User(UUIDMixin, TimestampMixin, Base):
    """
    User database model.

    The email column is stored lowercase and carries a unique index, which
    is the authoritative guard against duplicate registrations.
    """

    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[UserStatus] = mapped_column(
        Enum(
            UserStatus,
            name="user_status",
            native_enum=False,
            length=16,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=UserStatus.ACTIVE,
        nullable=False,
    )
    last_login: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r}, status={self.status.value})>"
