"""
User API Endpoints.

Profile, password, dashboard and account deactivation for the
authenticated caller.
"""

from fastapi import APIRouter

from keepnotes.backend.core.dependencies import AuthConfig, CurrentUser, DbSession
from keepnotes.backend.schemas.base import ApiResponse
from keepnotes.backend.schemas.user import (
    ChangePasswordRequest,
    Dashboard,
    ProfileUpdate,
    UserProfile,
)
from keepnotes.backend.services.account import AccountService

router = APIRouter()


@router.get(
    "/profile",
    response_model=ApiResponse[UserProfile],
    summary="Get profile",
)
async def get_profile(user: CurrentUser) -> ApiResponse[UserProfile]:
    return ApiResponse(
        message="Profile retrieved successfully",
        data=UserProfile.model_validate(user),
    )


@router.put(
    "/profile",
    response_model=ApiResponse[UserProfile],
    summary="Update profile",
    description="Change first name, last name or email. Omitted fields are kept.",
)
async def update_profile(
    data: ProfileUpdate,
    db: DbSession,
    auth: AuthConfig,
    user: CurrentUser,
) -> ApiResponse[UserProfile]:
    updated = await AccountService(db, auth).update_profile(user, data)
    return ApiResponse(
        message="Profile updated successfully",
        data=UserProfile.model_validate(updated),
    )


@router.post(
    "/change-password",
    response_model=ApiResponse[None],
    summary="Change password",
)
async def change_password(
    data: ChangePasswordRequest,
    db: DbSession,
    auth: AuthConfig,
    user: CurrentUser,
) -> ApiResponse[None]:
    await AccountService(db, auth).change_password(user, data)
    return ApiResponse(message="Password changed successfully")


@router.get(
    "/dashboard",
    response_model=ApiResponse[Dashboard],
    summary="Dashboard",
    description="Profile summary, note statistics, and recent and pinned notes.",
)
async def dashboard(
    db: DbSession,
    auth: AuthConfig,
    user: CurrentUser,
) -> ApiResponse[Dashboard]:
    data = await AccountService(db, auth).dashboard(user)
    return ApiResponse(message="Dashboard data retrieved successfully", data=data)


@router.delete(
    "/account",
    response_model=ApiResponse[None],
    summary="Deactivate account",
    description="Deactivates the account. Notes and the user record are kept.",
)
async def deactivate_account(
    db: DbSession,
    auth: AuthConfig,
    user: CurrentUser,
) -> ApiResponse[None]:
    await AccountService(db, auth).deactivate(user)
    return ApiResponse(message="Account deactivated successfully")
