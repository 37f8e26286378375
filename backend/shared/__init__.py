"""
Shared infrastructure for the Teamdesk backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: Role enumeration and the authenticated-user model

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import create_supabase_client
from .exceptions import (
    TeamdeskError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    StorageError,
)
from .models import AuthenticatedUser, Role

__all__ = [
    "Settings",
    "get_settings",
    "create_supabase_client",
    "TeamdeskError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "StorageError",
    "AuthenticatedUser",
    "Role",
]
