"""
Workspace module exceptions.

Missing projects, teams, tasks and users are reported with
modules.access.ResourceNotFoundError.
"""

from shared.exceptions import ConflictError


class AlreadyTeamMemberError(ConflictError):
    """The user is already on the team."""

    def __init__(self, team_id: str, user_id: str):
        super().__init__(
            "User is already a member of this team",
            code="ALREADY_MEMBER",
            details={"team_id": team_id, "user_id": user_id},
        )


class TeamAlreadyLinkedError(ConflictError):
    """The team is already linked to the project."""

    def __init__(self, project_id: str, team_id: str):
        super().__init__(
            "Team is already linked to this project",
            code="ALREADY_LINKED",
            details={"project_id": project_id, "team_id": team_id},
        )
