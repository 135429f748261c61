"""
Authentication API Endpoints.

Registration, login, and the password reset request. These are the only
account endpoints that do not require a bearer token.
"""

from fastapi import APIRouter

from keepnotes.backend.core.dependencies import AuthConfig, DbSession
from keepnotes.backend.schemas.base import ApiResponse
from keepnotes.backend.schemas.user import (
    AuthResult,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    UserSummary,
)
from keepnotes.backend.services.account import AccountService

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent."
)


@router.post(
    "/register",
    response_model=ApiResponse[AuthResult],
    status_code=201,
    summary="Register",
    description="Create an account and receive a session token.",
)
async def register(
    data: RegisterRequest,
    db: DbSession,
    auth: AuthConfig,
) -> ApiResponse[AuthResult]:
    token, user = await AccountService(db, auth).register(data)
    return ApiResponse(
        message="User registered successfully",
        data=AuthResult(token=token, user=UserSummary.model_validate(user)),
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthResult],
    summary="Log in",
    description="Exchange email and password for a session token.",
)
async def login(
    data: LoginRequest,
    db: DbSession,
    auth: AuthConfig,
) -> ApiResponse[AuthResult]:
    token, user = await AccountService(db, auth).login(data)
    return ApiResponse(
        message="Login successful",
        data=AuthResult(token=token, user=UserSummary.model_validate(user)),
    )


@router.post(
    "/forgot-password",
    response_model=ApiResponse[None],
    summary="Request a password reset",
    description="Always reports success, whether or not the email is registered.",
)
async def forgot_password(
    data: ForgotPasswordRequest,
    db: DbSession,
    auth: AuthConfig,
) -> ApiResponse[None]:
    await AccountService(db, auth).request_password_reset(data.email)
    return ApiResponse(message=FORGOT_PASSWORD_MESSAGE)
