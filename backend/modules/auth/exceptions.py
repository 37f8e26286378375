"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    ValidationError,
)


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a bearer token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class RevokedTokenError(AuthenticationError):
    """Raised when a bearer token has been blacklisted by logout."""

    def __init__(self, message: str = "Token has been revoked"):
        super().__init__(message, code="TOKEN_REVOKED")


class UserNotFoundError(AuthenticationError):
    """Raised when the user behind a token or ledger row doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised for an unknown email or a wrong password, indistinguishably."""

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class EmailNotVerifiedError(AuthenticationError):
    """Raised when a correct password is presented for an unverified account."""

    def __init__(self):
        super().__init__("Email not verified", code="EMAIL_NOT_VERIFIED")


class DuplicateIdentityError(ConflictError):
    """Raised when an email or username is already registered."""

    def __init__(self, field: str):
        super().__init__(
            f"{field.capitalize()} already registered",
            code="DUPLICATE_IDENTITY",
            details={"field": field},
        )


class PasswordMismatchError(ValidationError):
    """Raised when a password confirmation differs from the new password."""

    def __init__(self):
        super().__init__("Passwords do not match", code="PASSWORD_MISMATCH")


class LedgerTokenError(AuthenticationError):
    """
    Base for single-use token failures.

    The API renders every subclass identically so clients cannot tell
    a missing token from an expired or mistyped one.
    """

    pass


class LedgerTokenNotFoundError(LedgerTokenError):
    """No ledger row matches the presented token."""

    def __init__(self):
        super().__init__("Token not found", code="TOKEN_NOT_FOUND")


class LedgerTokenExpiredError(LedgerTokenError):
    """The ledger row exists but is past its expiry."""

    def __init__(self):
        super().__init__("Token has expired", code="TOKEN_EXPIRED")


class LedgerTokenTypeMismatchError(LedgerTokenError):
    """The ledger row exists but was issued for another purpose."""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Token type mismatch: expected {expected}",
            code="TOKEN_TYPE_MISMATCH",
            details={"expected": expected, "actual": actual},
        )


class DeliveryFailureError(ExternalServiceError):
    """Raised when a transactional email could not be sent."""

    def __init__(self, message: str = "Failed to send email"):
        super().__init__(message, service="smtp", code="DELIVERY_FAILURE")
