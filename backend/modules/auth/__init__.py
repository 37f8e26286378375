"""
Authentication module.

Handles credentials, bearer session tokens, the single-use token ledger
and the registration / login / verification / reset flows.

Public API:
- IAuthService: Interface for auth operations
- IEmailSender: Interface for the email delivery collaborator
- User, UserProfile: Stored and public user views
- TokenType: Ledger token discriminator
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService, IEmailSender
from .models import IssuedToken, SessionClaims, TokenType, User, UserProfile
from .exceptions import (
    DeliveryFailureError,
    DuplicateIdentityError,
    EmailNotVerifiedError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    LedgerTokenError,
    LedgerTokenExpiredError,
    LedgerTokenNotFoundError,
    LedgerTokenTypeMismatchError,
    MissingTokenError,
    PasswordMismatchError,
    RevokedTokenError,
    UserNotFoundError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IEmailSender",
    # Models
    "IssuedToken",
    "SessionClaims",
    "TokenType",
    "User",
    "UserProfile",
    # Exceptions
    "DeliveryFailureError",
    "DuplicateIdentityError",
    "EmailNotVerifiedError",
    "ExpiredTokenError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "LedgerTokenError",
    "LedgerTokenExpiredError",
    "LedgerTokenNotFoundError",
    "LedgerTokenTypeMismatchError",
    "MissingTokenError",
    "PasswordMismatchError",
    "RevokedTokenError",
    "UserNotFoundError",
]
