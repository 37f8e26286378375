"""Tests for the /api/users/me endpoints."""

from shared.models import Role

from tests.conftest import TEST_PASSWORD


class TestProfile:
    def test_get_profile(self, client, make_user):
        alice = make_user("alice@example.com", role=Role.MANAGER, username="alice")

        response = client.get("/api/users/me", headers=alice.headers)

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "alice@example.com"
        assert body["username"] == "alice"
        assert body["role"] == "manager"
        assert "password_hash" not in body

    def test_update_username(self, client, make_user):
        alice = make_user("alice@example.com")
        response = client.put("/api/users/me", json={"username": "alice"}, headers=alice.headers)
        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    def test_update_email_sends_verification(self, client, make_user, email_sender):
        alice = make_user("alice@example.com")

        response = client.put(
            "/api/users/me", json={"email": "alice@new.example.com"}, headers=alice.headers
        )

        assert response.status_code == 200
        assert response.json()["is_email_verified"] is False
        assert email_sender.sent[-1].to == "alice@new.example.com"

    def test_update_to_taken_username(self, client, make_user):
        make_user("bob@example.com", username="bob")
        alice = make_user("alice@example.com")
        response = client.put("/api/users/me", json={"username": "bob"}, headers=alice.headers)
        assert response.status_code == 409

    def test_empty_update(self, client, make_user):
        alice = make_user("alice@example.com")
        response = client.put("/api/users/me", json={}, headers=alice.headers)
        assert response.status_code == 400


class TestPassword:
    def test_change_password(self, client, make_user):
        alice = make_user("alice@example.com")

        response = client.put(
            "/api/users/me/password",
            json={"current_password": TEST_PASSWORD, "new_password": "brand-new"},
            headers=alice.headers,
        )
        assert response.status_code == 200

        login = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "brand-new"}
        )
        assert login.status_code == 200

    def test_wrong_current_password(self, client, make_user):
        alice = make_user("alice@example.com")
        response = client.put(
            "/api/users/me/password",
            json={"current_password": "wrong", "new_password": "brand-new"},
            headers=alice.headers,
        )
        assert response.status_code == 401


class TestDelete:
    def test_delete_account(self, client, make_user):
        alice = make_user("alice@example.com")

        assert client.delete("/api/users/me", headers=alice.headers).status_code == 200

        response = client.get("/api/users/me", headers=alice.headers)
        assert response.status_code == 401
        login = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        assert login.status_code == 401
