"""
User-related endpoints.

Provides endpoints for user profile and account management.
"""

from fastapi import APIRouter, Depends

from modules.auth.exceptions import UserNotFoundError
from modules.auth.interfaces import IAuthService
from modules.auth.models import (
    ChangePasswordRequest,
    MessageResponse,
    UpdateProfileRequest,
    UserProfile,
)
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service
from ..middleware.auth import get_current_user

router = APIRouter()


@router.get("/me", response_model=UserProfile)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> UserProfile:
    """
    Get the current user's profile.

    Requires authentication.
    """
    record = await service.get_user(user.id)
    if record is None:
        raise UserNotFoundError(user.id)
    return UserProfile.from_user(record)


@router.put("/me", response_model=UserProfile)
async def update_current_user_profile(
    request: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> UserProfile:
    """
    Update username and/or email.

    Changing the email clears the verified flag and sends a new
    verification link.
    """
    record = await service.update_profile(user.id, request)
    return UserProfile.from_user(record)


@router.put("/me/password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Change the password; the current password is required."""
    await service.change_password(user.id, request)
    return MessageResponse(message="Password updated successfully")


@router.delete("/me", response_model=MessageResponse)
async def delete_current_user(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Soft-delete the account and revoke the presenting token."""
    await service.delete_account(user)
    return MessageResponse(message="Account deleted successfully")
