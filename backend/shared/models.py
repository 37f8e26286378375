"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Account role. Closed set; the access policy covers every member."""

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    Built from verified bearer-token claims plus the stored user record,
    and made available to route handlers via dependency injection.
    """

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    username: Optional[str] = Field(None, description="Optional unique username")
    role: Role = Field(default=Role.MEMBER, description="Account role")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    token: str = Field(..., repr=False, description="The bearer token presented")

    model_config = {"frozen": True}
