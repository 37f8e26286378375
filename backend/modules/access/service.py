"""
Access control service implementation.

Read-only predicates over the project / team / task graph plus the
guards the workspace service calls before mutating anything.
"""

import logging
from typing import Any, Optional

from shared.models import AuthenticatedUser, Role

from .exceptions import AccessDeniedError, InsufficientRoleError, ResourceNotFoundError
from .interfaces import IAccessService
from .models import Action, role_allows
from .repository import AccessRepository

logger = logging.getLogger(__name__)


class AccessControlService(IAccessService):
    """
    Implementation of the access control service.

    Every predicate first confirms that the subject row exists, so a
    missing resource is always reported as ResourceNotFoundError and
    never as a plain "no".
    """

    def __init__(self, repository: AccessRepository):
        self._repo = repository

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    async def is_project_owner(self, user_id: str, project_id: str) -> bool:
        project = self._project(project_id)
        return str(project["owner_id"]) == user_id

    async def has_project_access(self, user_id: str, project_id: str) -> bool:
        project = self._project(project_id)
        if str(project["owner_id"]) == user_id:
            return True
        return self._repo.is_member_of_project_teams(user_id, project_id)

    async def is_team_member(self, user_id: str, team_id: str) -> bool:
        self._team(team_id)
        return self._repo.is_team_member(team_id, user_id)

    async def is_team_owner(self, user_id: str, team_id: str) -> bool:
        team = self._team(team_id)
        return str(team["owner_id"]) == user_id

    async def is_task_assignee(self, user_id: str, task_id: str) -> bool:
        task = self._task(task_id)
        assignee = task.get("assigned_to_id")
        return assignee is not None and str(assignee) == user_id

    async def has_task_access(self, user_id: str, task_id: str) -> bool:
        task = self._task(task_id)
        return await self.has_project_access(user_id, str(task["project_id"]))

    async def is_admin(self, user_id: str) -> bool:
        role = self._repo.get_user_role(user_id)
        if role is None:
            raise ResourceNotFoundError("user", user_id)
        return role is Role.ADMIN

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def require_role(self, user: AuthenticatedUser, action: Action) -> None:
        if not role_allows(user.role, action):
            logger.warning(f"User {user.id} ({user.role.value}) denied {action.value}")
            raise InsufficientRoleError(user.role, action)

    async def require_project_access(self, user: AuthenticatedUser, project_id: str) -> None:
        if not await self.has_project_access(user.id, project_id):
            self._deny(user, "project", project_id)

    async def require_project_manager(self, user: AuthenticatedUser, project_id: str) -> None:
        if await self.is_project_owner(user.id, project_id):
            return
        if role_allows(user.role, Action.MANAGE_ANY_PROJECT):
            return
        self._deny(user, "project", project_id, "Only the project owner can do this")

    async def require_team_access(self, user: AuthenticatedUser, team_id: str) -> None:
        """Team owner or member only; roles grant no read access."""
        if await self.is_team_owner(user.id, team_id):
            return
        if await self.is_team_member(user.id, team_id):
            return
        self._deny(user, "team", team_id)

    async def require_team_manager(self, user: AuthenticatedUser, team_id: str) -> None:
        if await self.is_team_owner(user.id, team_id):
            return
        if role_allows(user.role, Action.MANAGE_ANY_TEAM):
            return
        self._deny(user, "team", team_id, "Only the team owner can manage members")

    async def require_task_access(self, user: AuthenticatedUser, task_id: str) -> None:
        if not await self.has_task_access(user.id, task_id):
            self._deny(user, "task", task_id)

    async def require_task_editor(self, user: AuthenticatedUser, task_id: str) -> None:
        task = self._task(task_id)
        if await self.is_project_owner(user.id, str(task["project_id"])):
            return
        if await self.is_task_assignee(user.id, task_id):
            return
        if role_allows(user.role, Action.MANAGE_ANY_TASK):
            return
        self._deny(user, "task", task_id, "Only the project owner or assignee can update this task")

    async def require_can_notify(
        self,
        user: AuthenticatedUser,
        recipient_id: str,
        project_id: Optional[str] = None,
    ) -> None:
        """
        Gate sending a notification to another user.

        Anyone may notify themselves. Notifying someone else requires a
        project that both sender and recipient can access, unless the
        sender's role may notify any user.
        """
        if self._repo.get_user_role(recipient_id) is None:
            raise ResourceNotFoundError("user", recipient_id)
        if project_id is not None:
            self._project(project_id)

        if role_allows(user.role, Action.NOTIFY_ANY_USER):
            return
        if project_id is None:
            if recipient_id == user.id:
                return
            self._deny(
                user, "user", recipient_id,
                "Notifications to other users must reference a shared project",
            )
        if not await self.has_project_access(user.id, project_id):
            self._deny(user, "project", project_id)
        if not await self.has_project_access(recipient_id, project_id):
            self._deny(user, "user", recipient_id, "Recipient has no access to this project")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _project(self, project_id: str) -> dict[str, Any]:
        project = self._repo.get_project(project_id)
        if project is None:
            raise ResourceNotFoundError("project", project_id)
        return project

    def _team(self, team_id: str) -> dict[str, Any]:
        team = self._repo.get_team(team_id)
        if team is None:
            raise ResourceNotFoundError("team", team_id)
        return team

    def _task(self, task_id: str) -> dict[str, Any]:
        task = self._repo.get_task(task_id)
        if task is None:
            raise ResourceNotFoundError("task", task_id)
        return task

    def _deny(
        self,
        user: AuthenticatedUser,
        resource: str,
        resource_id: str,
        message: str = "You do not have access to this resource",
    ) -> None:
        logger.warning(f"User {user.id} denied access to {resource} {resource_id}")
        raise AccessDeniedError(message)
