"""
Authentication service implementation.

Orchestrates registration, login, logout, email verification and password
reset over the credential store, the bearer token issuer and the
single-use token ledger.

bcrypt hashing and SMTP delivery run in worker threads via
asyncio.to_thread so they never stall the event loop.
"""

import asyncio
import logging
from typing import Mapping, Optional

from shared.exceptions import StorageError, ValidationError
from shared.models import AuthenticatedUser, Role

from .credentials import CredentialStore
from .exceptions import (
    EmailNotVerifiedError,
    InvalidCredentialsError,
    PasswordMismatchError,
    RevokedTokenError,
    UserNotFoundError,
)
from .interfaces import IAuthService, IEmailSender
from .ledger import TokenLedger
from .models import (
    ChangePasswordRequest,
    IssuedToken,
    RegisterRequest,
    ResetPasswordRequest,
    TokenType,
    UpdateProfileRequest,
    User,
)
from .tokens import SessionTokenIssuer, mask_token

logger = logging.getLogger(__name__)


def build_invitation_codes(admin_code: str, manager_code: str) -> dict[str, Role]:
    """Map the configured invitation codes to roles, skipping empty codes."""
    codes: dict[str, Role] = {}
    if manager_code:
        codes[manager_code] = Role.MANAGER
    if admin_code:
        codes[admin_code] = Role.ADMIN
    return codes


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Stateless across calls: every request re-reads the ledger and the
    user record, nothing is cached in process.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        issuer: SessionTokenIssuer,
        ledger: TokenLedger,
        email_sender: IEmailSender,
        invitation_codes: Optional[Mapping[str, Role]] = None,
    ):
        self._credentials = credentials
        self._issuer = issuer
        self._ledger = ledger
        self._email = email_sender
        self._invitation_codes = dict(invitation_codes or {})

    def resolve_role(self, invitation_code: Optional[str]) -> Role:
        """Static lookup; anything unknown (or absent) is a member."""
        if not invitation_code:
            return Role.MEMBER
        return self._invitation_codes.get(invitation_code, Role.MEMBER)

    # -------------------------------------------------------------------------
    # Registration and verification
    # -------------------------------------------------------------------------

    async def register(self, request: RegisterRequest) -> User:
        role = self.resolve_role(request.invitation_code)
        user = await asyncio.to_thread(
            self._credentials.create_user,
            email=request.email,
            password=request.password,
            role=role,
            username=request.username,
        )
        verification = self._ledger.issue_verification(user.id)
        await asyncio.to_thread(
            self._email.send_verification_email, user.email, verification.token
        )

        logger.info(f"User registered: {user.id} with role {user.role.value}")
        return user

    async def verify_email(self, token: str) -> User:
        user_id = self._ledger.consume(token, TokenType.EMAIL_VERIFY)
        user = self._credentials.mark_email_verified(user_id)
        self._revoke_leftovers(user_id, TokenType.EMAIL_VERIFY)

        logger.info(f"Email verified for user: {user_id}")
        return user

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> IssuedToken:
        user = self._credentials.find_by_email(email)
        if user is None or not await asyncio.to_thread(
            self._credentials.verify_password, user, password
        ):
            raise InvalidCredentialsError()
        if not user.is_email_verified:
            raise EmailNotVerifiedError()

        issued = self._issuer.issue(user.id, user.role)
        logger.info(f"User logged in: {user.id}")
        return issued

    async def logout(self, token: str) -> None:
        claims = self._issuer.validate(token)
        self._ledger.blacklist(token, claims.user_id)
        logger.info(f"Token {mask_token(token)} blacklisted for user: {claims.user_id}")

    async def authenticate(self, token: Optional[str]) -> AuthenticatedUser:
        if token and self._ledger.is_blacklisted(token):
            logger.warning(f"Blacklisted token used: {mask_token(token)}")
            raise RevokedTokenError()

        claims = self._issuer.validate(token)

        user = self._credentials.get_user(claims.user_id)
        if user is None:
            logger.warning(f"Token presented for missing user: {claims.user_id}")
            raise UserNotFoundError(claims.user_id)

        return AuthenticatedUser(
            id=user.id,
            email=user.email,
            username=user.username,
            role=user.role,
            email_verified=user.is_email_verified,
            token=token,
        )

    # -------------------------------------------------------------------------
    # Password reset
    # -------------------------------------------------------------------------

    async def request_password_reset(self, email: str) -> None:
        user = self._credentials.find_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return

        reset = self._ledger.issue_reset(user.id)
        await asyncio.to_thread(self._email.send_password_reset_email, user.email, reset.token)
        logger.info(f"Password reset email sent for user: {user.id}")

    async def check_reset_token(self, token: str) -> None:
        self._ledger.peek(token, TokenType.PASSWORD_RESET)

    async def reset_password(self, request: ResetPasswordRequest) -> None:
        # Must run before the ledger is touched
        if (
            request.confirm_password is not None
            and request.confirm_password != request.new_password
        ):
            raise PasswordMismatchError()

        user_id = self._ledger.consume(request.token, TokenType.PASSWORD_RESET)
        user = self._credentials.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        await asyncio.to_thread(self._credentials.update_password, user, request.new_password)
        self._revoke_leftovers(user_id, TokenType.PASSWORD_RESET)

        logger.info(f"Password reset for user: {user_id}")

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    async def get_user(self, user_id: str) -> Optional[User]:
        return self._credentials.get_user(user_id)

    async def update_profile(self, user_id: str, request: UpdateProfileRequest) -> User:
        if request.username is None and request.email is None:
            raise ValidationError("No fields to update", code="EMPTY_UPDATE")

        user = self._require_user(user_id)
        updated, email_changed = self._credentials.update_profile(
            user,
            email=request.email,
            username=request.username,
        )
        if email_changed:
            verification = self._ledger.issue_verification(updated.id)
            await asyncio.to_thread(
                self._email.send_verification_email, updated.email, verification.token
            )
            logger.info(f"Email changed for user {user_id}; verification sent")

        logger.info(f"Profile updated for user: {user_id}")
        return updated

    async def change_password(self, user_id: str, request: ChangePasswordRequest) -> None:
        user = self._require_user(user_id)
        if not await asyncio.to_thread(
            self._credentials.verify_password, user, request.current_password
        ):
            raise InvalidCredentialsError()

        await asyncio.to_thread(self._credentials.update_password, user, request.new_password)
        logger.info(f"Password changed for user: {user_id}")

    async def delete_account(self, user: AuthenticatedUser) -> None:
        self._credentials.delete_user(user.id)
        self._ledger.blacklist(user.token, user.id)
        logger.info(f"Account deleted: {user.id}")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_user(self, user_id: str) -> User:
        user = self._credentials.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _revoke_leftovers(self, user_id: str, token_type: TokenType) -> None:
        """
        Drop other outstanding tokens of the same type.

        The user-visible effect has already happened, so a failure here
        is logged and not surfaced.
        """
        try:
            removed = self._ledger.revoke_outstanding(user_id, token_type)
        except StorageError as e:
            logger.error(
                f"Failed to revoke outstanding {token_type.value} tokens "
                f"for user {user_id}: {e.message}"
            )
            return
        if removed:
            logger.info(
                f"Revoked {removed} outstanding {token_type.value} tokens for user {user_id}"
            )
