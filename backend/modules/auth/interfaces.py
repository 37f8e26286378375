"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    ChangePasswordRequest,
    IssuedToken,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    User,
)


@runtime_checkable
class IEmailSender(Protocol):
    """Delivery collaborator for links that embed ledger tokens."""

    def send_verification_email(self, to_email: str, token: str) -> None:
        """Send an email-verification link. Raises DeliveryFailureError."""
        ...

    def send_password_reset_email(self, to_email: str, token: str) -> None:
        """Send a password-reset link. Raises DeliveryFailureError."""
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to the API layer and other modules.
    """

    async def register(self, request: RegisterRequest) -> User:
        """
        Create an unverified account and email a verification link.

        Raises:
            DuplicateIdentityError: If the email or username is taken
            DeliveryFailureError: If the verification email can't be sent
        """
        ...

    async def login(self, email: str, password: str) -> IssuedToken:
        """
        Exchange credentials for a bearer token.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            EmailNotVerifiedError: Correct password, unverified email
        """
        ...

    async def logout(self, token: str) -> None:
        """Blacklist the exact bearer token string."""
        ...

    async def authenticate(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Resolve a bearer token to the user it was issued to.

        Checks the blacklist first, then signature and expiry, then that
        the user still exists.

        Raises:
            AuthenticationError: Missing, revoked, expired or malformed token,
                or a user that no longer exists
        """
        ...

    async def verify_email(self, token: str) -> User:
        """Consume an email_verify token and mark the email verified."""
        ...

    async def request_password_reset(self, email: str) -> None:
        """Email a reset link if the account exists; silent otherwise."""
        ...

    async def check_reset_token(self, token: str) -> None:
        """Validate a password_reset token without consuming it."""
        ...

    async def reset_password(self, request: ResetPasswordRequest) -> None:
        """Consume a password_reset token and set the new password."""
        ...

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get an active user by ID."""
        ...

    async def update_profile(self, user_id: str, request: UpdateProfileRequest) -> User:
        """Change username and/or email; an email change needs re-verification."""
        ...

    async def change_password(self, user_id: str, request: ChangePasswordRequest) -> None:
        """Change password after checking the current one."""
        ...

    async def delete_account(self, user: AuthenticatedUser) -> None:
        """Soft-delete the account and revoke the presenting token."""
        ...
