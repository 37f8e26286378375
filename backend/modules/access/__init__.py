"""
Access control module.

Ownership and membership predicates over projects, teams and tasks,
and the static role policy.

Public API:
- IAccessService: Interface for access checks
- Action, ROLE_PERMISSIONS, role_allows: Role policy
- ResourceNotFoundError, AccessDeniedError, InsufficientRoleError
"""

from .interfaces import IAccessService
from .models import Action, ROLE_PERMISSIONS, role_allows
from .exceptions import AccessDeniedError, InsufficientRoleError, ResourceNotFoundError

__all__ = [
    "IAccessService",
    "Action",
    "ROLE_PERMISSIONS",
    "role_allows",
    "AccessDeniedError",
    "InsufficientRoleError",
    "ResourceNotFoundError",
]
