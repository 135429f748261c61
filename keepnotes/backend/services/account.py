"""
Account Service.

Registration, login, profile and password management, deactivation, and
the dashboard view. Credentials are checked here; session tokens are
issued with the AuthSettings the service was constructed with.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from keepnotes.backend.core.config import AuthSettings
from keepnotes.backend.core.exceptions import (
    AccountDeactivatedError,
    AuthenticationError,
    ConflictError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    NoOpChangeError,
)
from keepnotes.backend.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from keepnotes.backend.core.utils import utc_now
from keepnotes.backend.models.user import User, UserStatus
from keepnotes.backend.repositories.user import UserRepository
from keepnotes.backend.schemas.user import (
    ChangePasswordRequest,
    Dashboard,
    DashboardStatistics,
    DashboardUser,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
)
from keepnotes.backend.schemas.note import NoteSummary
from keepnotes.backend.services.base import BaseService
from keepnotes.backend.services.note import NoteService

EMAIL_TAKEN_MESSAGE = "An account with this email address already exists."


class AccountService(BaseService):
    """
    Service for user accounts.

    Every method that takes a `user` expects an already authenticated,
    session-attached User.
    """

    def __init__(self, session: AsyncSession, auth: AuthSettings) -> None:
        super().__init__(session)
        self.auth = auth
        self.repo = UserRepository(session)

    def _issue_token(self, user: User) -> str:
        return create_access_token(user.id, self.auth)

    async def register(self, data: RegisterRequest) -> tuple[str, User]:
        """
        Create an account and log it in.

        Returns:
            Tuple of (session token, created user)

        Raises:
            ConflictError: If any account, active or not, has the email
        """
        if await self.repo.email_taken(data.email):
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        self._log_operation("Registering user")

        user = await self._execute_db_operation(
            "register_user",
            self.repo.create(
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                password_hash=hash_password(data.password, rounds=self.auth.bcrypt_rounds),
                status=UserStatus.ACTIVE,
            ),
            conflict_message=EMAIL_TAKEN_MESSAGE,
        )
        token = self._issue_token(user)
        user = await self._execute_db_operation(
            "record_login",
            self.repo.apply(user, last_login=utc_now()),
        )

        self._log_debug("User registered", user_id=user.id)
        return token, user

    async def login(self, data: LoginRequest) -> tuple[str, User]:
        """
        Verify credentials and issue a fresh session token.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            AccountDeactivatedError: The account exists but is deactivated
        """
        user = await self.repo.get_by_email(data.email)
        if user is None:
            self._log_debug("Login failed", reason="unknown_email")
            raise InvalidCredentialsError()

        if not user.is_active:
            self._log_operation("Login refused for deactivated account", user_id=user.id)
            raise AccountDeactivatedError()

        if not verify_password(data.password, user.password_hash):
            self._log_debug("Login failed", reason="bad_password", user_id=user.id)
            raise InvalidCredentialsError()

        user = await self._execute_db_operation(
            "record_login",
            self.repo.apply(user, last_login=utc_now()),
        )
        self._log_operation("User logged in", user_id=user.id)
        return self._issue_token(user), user

    async def request_password_reset(self, email: str) -> None:
        """
        Record a password reset request.

        The caller reports the same outcome whether or not the email exists.
        No reset token is issued.
        """
        user = await self.repo.get_by_email(email)
        if user is not None:
            self._log_operation("Password reset requested", user_id=user.id)

    async def authenticate(self, token: str) -> User:
        """
        Resolve a session token to an active user.

        Raises:
            AuthenticationError: Bad token, unknown user, or deactivated user
        """
        user_id = decode_access_token(token, self.auth)
        user = await self.repo.get_by_id_or_none(user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("Invalid or expired token")
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Apply profile changes. Omitted fields stay unchanged.

        Raises:
            ConflictError: If the new email belongs to another account
        """
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if "email" in changes and changes["email"] != user.email:
            if await self.repo.email_taken(changes["email"], exclude_id=user.id):
                raise ConflictError(EMAIL_TAKEN_MESSAGE)

        if not changes:
            return user

        self._log_operation("Updating profile", user_id=user.id, fields=list(changes))
        return await self._execute_db_operation(
            "update_profile",
            self.repo.apply(user, **changes),
            conflict_message=EMAIL_TAKEN_MESSAGE,
        )

    async def change_password(self, user: User, data: ChangePasswordRequest) -> None:
        """
        Replace the user's password.

        Raises:
            IncorrectPasswordError: current_password does not match
            NoOpChangeError: new_password matches the stored hash
        """
        if not verify_password(data.current_password, user.password_hash):
            raise IncorrectPasswordError()

        if verify_password(data.new_password, user.password_hash):
            raise NoOpChangeError()

        await self._execute_db_operation(
            "change_password",
            self.repo.apply(
                user,
                password_hash=hash_password(data.new_password, rounds=self.auth.bcrypt_rounds),
            ),
        )
        self._log_operation("Password changed", user_id=user.id)

    async def deactivate(self, user: User) -> None:
        """Soft-delete the account. Calling it again is a no-op."""
        if user.status == UserStatus.DEACTIVATED:
            return
        await self._execute_db_operation(
            "deactivate_account",
            self.repo.apply(user, status=UserStatus.DEACTIVATED),
        )
        self._log_operation("Account deactivated", user_id=user.id)

    async def dashboard(self, user: User) -> Dashboard:
        """Profile, note statistics, and the latest and pinned notes."""
        notes = NoteService(self.session)
        stats = await notes.get_statistics(user.id)
        today = await notes.count_updated_today(user.id)
        recent = await notes.recent_notes(user.id)
        pinned = await notes.recent_pinned_notes(user.id)

        return Dashboard(
            user=DashboardUser.model_validate(user),
            statistics=DashboardStatistics(**stats.model_dump(), today_activity=today),
            recent_notes=[NoteSummary.model_validate(note) for note in recent],
            pinned_notes=[NoteSummary.model_validate(note) for note in pinned],
        )
