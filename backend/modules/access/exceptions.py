"""
Access control exceptions.

ResourceNotFoundError and the authorization errors are kept in
different base classes so the API layer can never conflate a 404
with a 403.
"""

from shared.exceptions import AuthorizationError, NotFoundError
from shared.models import Role

from .models import Action


class ResourceNotFoundError(NotFoundError):
    """A project, team, task or user referenced by ID does not exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            f"{resource.capitalize()} not found",
            code="RESOURCE_NOT_FOUND",
            details={"resource": resource, "id": resource_id},
        )
        self.resource = resource
        self.resource_id = resource_id


class AccessDeniedError(AuthorizationError):
    """The user has no ownership or membership granting this operation."""

    def __init__(self, message: str = "You do not have access to this resource"):
        super().__init__(message, code="ACCESS_DENIED")


class InsufficientRoleError(AuthorizationError):
    """The user's role does not permit this operation."""

    def __init__(self, role: Role, action: Action):
        super().__init__(
            f"Role '{role.value}' is not allowed to {action.value.replace('_', ' ')}",
            code="INSUFFICIENT_ROLE",
            details={"role": role.value, "action": action.value},
        )
        self.role = role
        self.action = action
