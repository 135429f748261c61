"""
User Repository.

Data access layer for accounts. Emails are expected already normalized.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from keepnotes.backend.models.user import User
from keepnotes.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email regardless of status."""
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        """
        Check whether any account, active or not, holds the email.

        Args:
            email: Normalized email
            exclude_id: Account to ignore (the one being updated)
        """
        query = select(func.count()).select_from(User).where(User.email == email)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one() > 0
