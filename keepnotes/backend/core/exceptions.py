"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Each class carries a stable machine-readable code and a short title that
becomes the "error" field of the response envelope.

Input validation is not an application error: request schemas reject bad
input before a service runs, and the 422 handler reports it.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    title = "Internal server error"

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found, or belongs to someone else."""

    title = "Not found"

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class AuthenticationError(ApplicationError):
    """Raised when a request carries no usable identity."""

    title = "Not authenticated"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class InvalidCredentialsError(AuthenticationError):
    """Raised on login failure. Unknown email and wrong password look the same."""

    title = "Invalid credentials"

    def __init__(self, message: str = "Invalid email or password.") -> None:
        ApplicationError.__init__(self, message, code="AUTH_INVALID_CREDENTIALS")


class IncorrectPasswordError(InvalidCredentialsError):
    """Raised when the current password supplied to a password change is wrong."""

    title = "Invalid current password"

    def __init__(
        self,
        message: str = "The current password you entered is incorrect.",
    ) -> None:
        ApplicationError.__init__(self, message, code="AUTH_INCORRECT_PASSWORD")


class AccountDeactivatedError(ApplicationError):
    """Raised when a deactivated account attempts to log in."""

    title = "Account deactivated"

    def __init__(
        self,
        message: str = "Your account has been deactivated. Please contact support.",
    ) -> None:
        super().__init__(message, code="AUTH_ACCOUNT_DEACTIVATED")


class NoOpChangeError(ApplicationError):
    """Raised when a password change would keep the current password."""

    title = "Same password"

    def __init__(
        self,
        message: str = "New password must be different from your current password.",
    ) -> None:
        super().__init__(message, code="AUTH_PASSWORD_UNCHANGED")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    title = "Conflict"

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    title = "Service unavailable"

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
