"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from shared.models import Role


class TokenType(str, Enum):
    """Discriminator for rows in the single-use token ledger."""

    PASSWORD_RESET = "password_reset"
    EMAIL_VERIFY = "email_verify"
    JWT_BLACKLIST = "jwt_blacklist"


class User(BaseModel):
    """
    Stored user record.

    password_hash is excluded from every dump so it can never reach
    a response body or a log line built from model_dump().
    """

    id: str
    email: str
    username: Optional[str] = None
    password_hash: str = Field(..., exclude=True, repr=False)
    role: Role = Role.MEMBER
    is_email_verified: bool = False
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class LedgerToken(BaseModel):
    """A row in the single-use token ledger."""

    id: str
    user_id: str
    token: str = Field(..., repr=False)
    type: TokenType
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True once the current time has reached expires_at."""
        now = now or datetime.now(timezone.utc)
        return self.expires_at <= now


class SessionClaims(BaseModel):
    """
    Decoded bearer token payload.

    sub carries the user id; role is the role at issuance time.
    """

    sub: str = Field(..., description="Subject (user ID)")
    role: Role = Field(..., description="Role at issuance")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")
    iss: str = Field(..., description="Issuer")

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


class IssuedToken(BaseModel):
    """A freshly signed bearer token."""

    token: str
    expires_at: datetime


# -------------------------------------------------------------------------
# Request / response bodies
# -------------------------------------------------------------------------


def _normalize_email(value: str) -> str:
    return value.strip().lower()


NormalizedEmail = Annotated[EmailStr, AfterValidator(_normalize_email)]


class RegisterRequest(BaseModel):
    """Body of POST /api/auth/register."""

    email: NormalizedEmail
    password: str = Field(..., min_length=6, max_length=72)
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    invitation_code: Optional[str] = None


class LoginRequest(BaseModel):
    """Body of POST /api/auth/login."""

    email: NormalizedEmail
    password: str


class LoginResponse(BaseModel):
    """Successful login."""

    token: str
    token_type: str = "bearer"
    expires_at: datetime


class PasswordResetRequest(BaseModel):
    """Body of POST /api/auth/request-password-reset."""

    email: NormalizedEmail


class ResetPasswordRequest(BaseModel):
    """Body of POST /api/auth/reset-password."""

    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=72)
    confirm_password: Optional[str] = None


class MessageResponse(BaseModel):
    """Generic acknowledgement."""

    message: str


class UserProfile(BaseModel):
    """Public view of a user record."""

    id: str
    email: str
    username: Optional[str] = None
    role: Role
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(**user.model_dump())


class UpdateProfileRequest(BaseModel):
    """Body of PUT /api/users/me. At least one field must be present."""

    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[NormalizedEmail] = None


class ChangePasswordRequest(BaseModel):
    """Body of PUT /api/users/me/password."""

    current_password: str
    new_password: str = Field(..., min_length=6, max_length=72)
