"""
Tests for WorkspaceRepository against the in-memory Supabase fake.
"""

import pytest

from modules.access.exceptions import ResourceNotFoundError
from modules.auth.repository import UserRepository
from modules.workspace.exceptions import AlreadyTeamMemberError, TeamAlreadyLinkedError
from modules.workspace.repository import WorkspaceRepository
from shared.exceptions import StorageError
from shared.models import Role


@pytest.fixture
def repo(db):
    return WorkspaceRepository(db)


@pytest.fixture
def users(db):
    users = UserRepository(db)
    return {
        name: users.create(f"{name}@example.com", "hash", role).id
        for name, role in [("owner", Role.MANAGER), ("member", Role.MEMBER), ("outsider", Role.MEMBER)]
    }


class TestProjectListing:
    def test_owned_and_team_linked_projects_newest_first(self, repo, users):
        old = repo.create_project(
            users["owner"], {"title": "Old", "created_at": "2026-01-01T00:00:00+00:00"}
        )
        new = repo.create_project(
            users["owner"], {"title": "New", "created_at": "2026-03-01T00:00:00+00:00"}
        )
        team = repo.create_team(users["owner"], {"name": "Core"})
        repo.add_member(team.id, users["member"])
        repo.link_team(old.id, team.id)

        assert [p.id for p in repo.list_projects_for_user(users["owner"])] == [new.id, old.id]
        assert [p.id for p in repo.list_projects_for_user(users["member"])] == [old.id]
        assert repo.list_projects_for_user(users["outsider"]) == []

    def test_project_reached_twice_is_listed_once(self, repo, users):
        project = repo.create_project(users["owner"], {"title": "P"})
        for name in ("A", "B"):
            team = repo.create_team(users["owner"], {"name": name})
            repo.add_member(team.id, users["owner"])
            repo.link_team(project.id, team.id)

        assert [p.id for p in repo.list_projects_for_user(users["owner"])] == [project.id]


class TestDeleteProject:
    def test_removes_tasks_and_links(self, repo, users, db):
        project = repo.create_project(users["owner"], {"title": "Doomed"})
        team = repo.create_team(users["owner"], {"name": "Core"})
        repo.link_team(project.id, team.id)
        repo.create_task(project.id, {"title": "T", "priority": "Low", "status": "Pending"})

        assert repo.delete_project(project.id) is True

        assert repo.get_project(project.id) is None
        assert db.rows("tasks") == []
        assert db.rows("project_teams") == []
        assert repo.get_team(team.id) is not None

    def test_missing_project_returns_false(self, repo):
        assert repo.delete_project("missing") is False


class TestLinksAndMembers:
    def test_duplicate_link_raises_conflict(self, repo, users):
        project = repo.create_project(users["owner"], {"title": "P"})
        team = repo.create_team(users["owner"], {"name": "Core"})
        repo.link_team(project.id, team.id)

        with pytest.raises(TeamAlreadyLinkedError):
            repo.link_team(project.id, team.id)

    def test_linked_teams_are_ordered_by_name(self, repo, users):
        project = repo.create_project(users["owner"], {"title": "P"})
        for name in ("Zeta", "Alpha"):
            repo.link_team(project.id, repo.create_team(users["owner"], {"name": name}).id)

        assert [t.name for t in repo.list_project_teams(project.id)] == ["Alpha", "Zeta"]

    def test_duplicate_member_raises_conflict(self, repo, users):
        team = repo.create_team(users["owner"], {"name": "Core"})
        repo.add_member(team.id, users["member"])

        with pytest.raises(AlreadyTeamMemberError):
            repo.add_member(team.id, users["member"])

    def test_unknown_member_maps_to_not_found(self, repo, users):
        team = repo.create_team(users["owner"], {"name": "Core"})

        with pytest.raises(ResourceNotFoundError):
            repo.add_member(team.id, "no-such-user")

    def test_remove_member_reports_whether_a_row_went(self, repo, users):
        team = repo.create_team(users["owner"], {"name": "Core"})
        repo.add_member(team.id, users["member"])

        assert repo.remove_member(team.id, users["member"]) is True
        assert repo.remove_member(team.id, users["member"]) is False
        assert repo.list_member_ids(team.id) == []

    def test_other_driver_errors_become_storage_errors(self, repo, users, db):
        team = repo.create_team(users["owner"], {"name": "Core"})
        db.fail("team_members", "insert")

        with pytest.raises(StorageError):
            repo.add_member(team.id, users["member"])


class TestUsers:
    def test_soft_deleted_user_does_not_exist(self, repo, users, db):
        UserRepository(db).soft_delete(users["member"])

        assert repo.user_exists(users["owner"]) is True
        assert repo.user_exists(users["member"]) is False
