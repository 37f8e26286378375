"""End-to-end tests for the notification endpoints."""

import pytest

from shared.models import Role


@pytest.fixture
def people(make_user):
    return {
        "manager": make_user("manager@example.com", role=Role.MANAGER),
        "member": make_user("member@example.com"),
        "outsider": make_user("outsider@example.com"),
        "admin": make_user("admin@example.com", role=Role.ADMIN),
    }


@pytest.fixture
def project(client, people):
    """A manager-owned project shared with `member` through a team."""
    manager = people["manager"]
    project = client.post("/api/projects", json={"title": "Launch"}, headers=manager.headers).json()
    team = client.post("/api/teams", json={"name": "Crew"}, headers=manager.headers).json()
    client.post(
        f"/api/teams/{team['id']}/members",
        json={"user_id": people["member"].id},
        headers=manager.headers,
    )
    client.post(
        f"/api/projects/{project['id']}/teams",
        json={"team_id": team["id"]},
        headers=manager.headers,
    )
    return project


def notify(client, sender, recipient_id, **body):
    payload = {"user_id": recipient_id, "content": "Heads up", "type": "info", **body}
    return client.post("/api/notifications", json=payload, headers=sender.headers)


class TestCreate:
    def test_notify_self(self, client, people):
        member = people["member"]
        response = notify(client, member, member.id)

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == member.id
        assert body["is_read"] is False
        assert body["project_id"] is None

    def test_notify_co_member_through_project(self, client, people, project):
        response = notify(
            client, people["manager"], people["member"].id, project_id=project["id"], type="warning"
        )
        assert response.status_code == 201
        assert response.json()["project_id"] == project["id"]

    def test_other_user_without_project_is_forbidden(self, client, people):
        response = notify(client, people["member"], people["outsider"].id)
        assert response.status_code == 403

    def test_recipient_outside_project_is_forbidden(self, client, people, project):
        response = notify(
            client, people["manager"], people["outsider"].id, project_id=project["id"]
        )
        assert response.status_code == 403

    def test_admin_notifies_anyone(self, client, people):
        assert notify(client, people["admin"], people["outsider"].id).status_code == 201

    def test_unknown_recipient_or_project(self, client, people):
        admin = people["admin"]
        assert notify(client, admin, "missing").status_code == 404
        response = notify(client, admin, people["member"].id, project_id="missing")
        assert response.status_code == 404

    def test_type_is_checked(self, client, people):
        member = people["member"]
        assert notify(client, member, member.id, type="shout").status_code == 422

    def test_requires_auth(self, client, people):
        response = client.post(
            "/api/notifications",
            json={"user_id": people["member"].id, "content": "x", "type": "info"},
        )
        assert response.status_code == 401


class TestOwnership:
    def test_list_is_scoped_to_caller(self, client, people, project):
        member, manager = people["member"], people["manager"]
        notify(client, member, member.id)
        notify(client, manager, member.id, project_id=project["id"])
        notify(client, manager, manager.id)

        listing = client.get("/api/notifications", headers=member.headers).json()
        assert listing["total"] == 2
        assert listing["unread"] == 2
        assert {n["user_id"] for n in listing["notifications"]} == {member.id}

    def test_filter_by_project(self, client, people, project):
        member, manager = people["member"], people["manager"]
        notify(client, member, member.id)
        notify(client, manager, member.id, project_id=project["id"])

        listing = client.get(
            "/api/notifications", params={"project_id": project["id"]}, headers=member.headers
        ).json()
        assert listing["total"] == 1
        assert listing["notifications"][0]["project_id"] == project["id"]

    def test_other_users_rows_look_missing(self, client, people):
        member, outsider = people["member"], people["outsider"]
        notification = notify(client, member, member.id).json()
        url = f"/api/notifications/{notification['id']}"

        assert client.get(url, headers=outsider.headers).status_code == 404
        assert client.put(url, json={"is_read": True}, headers=outsider.headers).status_code == 404
        assert client.delete(url, headers=outsider.headers).status_code == 404
        assert client.get(url, headers=member.headers).json()["is_read"] is False

    def test_sender_cannot_read_what_they_sent(self, client, people, project):
        notification = notify(
            client, people["manager"], people["member"].id, project_id=project["id"]
        ).json()
        response = client.get(
            f"/api/notifications/{notification['id']}", headers=people["manager"].headers
        )
        assert response.status_code == 404


class TestUpdateAndDelete:
    def test_mark_read(self, client, people):
        member = people["member"]
        notification = notify(client, member, member.id).json()
        url = f"/api/notifications/{notification['id']}"

        response = client.put(url, json={"is_read": True}, headers=member.headers)
        assert response.status_code == 200
        assert response.json()["is_read"] is True
        assert response.json()["content"] == "Heads up"
        assert client.get("/api/notifications", headers=member.headers).json()["unread"] == 0

    def test_empty_and_null_updates(self, client, people):
        member = people["member"]
        notification = notify(client, member, member.id).json()
        url = f"/api/notifications/{notification['id']}"

        response = client.put(url, json={}, headers=member.headers)
        assert response.status_code == 400
        assert response.json()["code"] == "EMPTY_UPDATE"
        assert client.put(url, json={"is_read": None}, headers=member.headers).status_code == 422

    def test_delete(self, client, people):
        member = people["member"]
        notification = notify(client, member, member.id).json()
        url = f"/api/notifications/{notification['id']}"

        assert client.delete(url, headers=member.headers).status_code == 204
        assert client.get(url, headers=member.headers).status_code == 404

    def test_project_deletion_keeps_notification(self, client, people, project, db):
        manager, member = people["manager"], people["member"]
        notification = notify(client, manager, member.id, project_id=project["id"]).json()

        client.delete(f"/api/projects/{project['id']}", headers=manager.headers)

        fetched = client.get(f"/api/notifications/{notification['id']}", headers=member.headers)
        assert fetched.status_code == 200
        assert fetched.json()["project_id"] is None
