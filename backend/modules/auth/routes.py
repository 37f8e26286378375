"""
Authentication API endpoints.

Registration, login/logout, email verification and password reset.
Domain errors propagate to the exception handlers registered in
api.error_handling, which map them to status codes.
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_auth_service
from api.middleware.auth import get_current_user
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordResetRequest,
    RegisterRequest,
    ResetPasswordRequest,
)

router = APIRouter()

RESET_REQUESTED_MESSAGE = "If the email is registered, a password reset link has been sent."


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(
    request: RegisterRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Create an account.

    The account starts unverified; a verification link is emailed.
    """
    await service.register(request)
    return MessageResponse(
        message="Registration successful. Please check your email to verify your account."
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Exchange email and password for a bearer token."""
    issued = await service.login(request.email, request.password)
    return LoginResponse(token=issued.token, expires_at=issued.expires_at)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Revoke the presenting bearer token.

    Other tokens issued to the same user stay valid.
    """
    await service.logout(user.token)
    return MessageResponse(message="Logged out successfully")


@router.get("/verify-email", response_model=MessageResponse)
async def verify_email(
    token: str = Query(..., min_length=1),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Consume the emailed verification token."""
    await service.verify_email(token)
    return MessageResponse(message="Email verified successfully")


@router.post("/request-password-reset", response_model=MessageResponse)
async def request_password_reset(
    request: PasswordResetRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Email a password reset link.

    The response is the same whether or not the email is registered.
    """
    await service.request_password_reset(request.email)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.get("/reset-password", response_model=MessageResponse)
async def check_reset_token(
    token: str = Query(..., min_length=1),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Check that a reset link is still live without using it up."""
    await service.check_reset_token(token)
    return MessageResponse(message="Token is valid")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set a new password using an emailed reset token."""
    await service.reset_password(request)
    return MessageResponse(message="Password has been reset successfully")
