"""
Access control policy models.

The role policy is a static table: every Role has an entry, so a lookup
can never fall through to a default.
"""

from enum import Enum

from shared.models import Role


class Action(str, Enum):
    """Operations gated by role rather than by ownership."""

    CREATE_PROJECT = "create_project"
    MANAGE_ANY_PROJECT = "manage_any_project"
    MANAGE_ANY_TEAM = "manage_any_team"
    MANAGE_ANY_TASK = "manage_any_task"
    CREATE_TEAM = "create_team"
    NOTIFY_ANY_USER = "notify_any_user"


ROLE_PERMISSIONS: dict[Role, frozenset[Action]] = {
    Role.ADMIN: frozenset(Action),
    Role.MANAGER: frozenset({
        Action.CREATE_PROJECT,
        Action.CREATE_TEAM,
    }),
    Role.MEMBER: frozenset({
        Action.CREATE_TEAM,
    }),
}


def role_allows(role: Role, action: Action) -> bool:
    """Check the static role policy."""
    return action in ROLE_PERMISSIONS[role]
