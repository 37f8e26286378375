"""
Access control module interface.

Predicates answer a yes/no question and raise ResourceNotFoundError when
the subject row is missing. The require_* guards turn a "no" into
AccessDeniedError or InsufficientRoleError.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import Action


@runtime_checkable
class IAccessService(Protocol):
    """Interface for access control checks."""

    async def is_project_owner(self, user_id: str, project_id: str) -> bool:
        ...

    async def has_project_access(self, user_id: str, project_id: str) -> bool:
        """Owner, or member of a team linked to the project."""
        ...

    async def is_team_member(self, user_id: str, team_id: str) -> bool:
        ...

    async def is_team_owner(self, user_id: str, team_id: str) -> bool:
        ...

    async def is_task_assignee(self, user_id: str, task_id: str) -> bool:
        ...

    async def has_task_access(self, user_id: str, task_id: str) -> bool:
        """Same answer as has_project_access on the task's project."""
        ...

    async def is_admin(self, user_id: str) -> bool:
        """Role check only."""
        ...

    def require_role(self, user: AuthenticatedUser, action: Action) -> None:
        ...

    async def require_project_access(self, user: AuthenticatedUser, project_id: str) -> None:
        ...

    async def require_project_manager(self, user: AuthenticatedUser, project_id: str) -> None:
        """Project owner, or a role allowed to manage any project."""
        ...

    async def require_team_access(self, user: AuthenticatedUser, team_id: str) -> None:
        ...

    async def require_team_manager(self, user: AuthenticatedUser, team_id: str) -> None:
        """Team owner, or a role allowed to manage any team."""
        ...

    async def require_task_access(self, user: AuthenticatedUser, task_id: str) -> None:
        ...

    async def require_task_editor(self, user: AuthenticatedUser, task_id: str) -> None:
        """Project owner, task assignee, or a role allowed to manage any task."""
        ...

    async def require_can_notify(
        self,
        user: AuthenticatedUser,
        recipient_id: str,
        project_id: Optional[str] = None,
    ) -> None:
        """Self, a co-member of the given project, or a role allowed to notify any user."""
        ...
