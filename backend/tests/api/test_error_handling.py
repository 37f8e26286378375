"""Tests for api/error_handling.py."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.error_handling import register_exception_handlers, status_for
from modules.access.exceptions import AccessDeniedError, InsufficientRoleError, ResourceNotFoundError
from modules.access.models import Action
from modules.auth.exceptions import (
    DeliveryFailureError,
    DuplicateIdentityError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    LedgerTokenExpiredError,
    LedgerTokenNotFoundError,
    LedgerTokenTypeMismatchError,
    PasswordMismatchError,
)
from shared.exceptions import StorageError
from shared.models import Role


@pytest.mark.parametrize(
    "error,status",
    [
        (DuplicateIdentityError("email"), 409),
        (InvalidCredentialsError(), 401),
        (EmailNotVerifiedError(), 401),
        (LedgerTokenNotFoundError(), 401),
        (AccessDeniedError(), 403),
        (InsufficientRoleError(Role.MEMBER, Action.CREATE_PROJECT), 403),
        (ResourceNotFoundError("project", "p1"), 404),
        (PasswordMismatchError(), 400),
        (StorageError("boom", table="users"), 500),
        (DeliveryFailureError(), 500),
    ],
)
def test_status_for(error, status):
    assert status_for(error) == status


@pytest.fixture
def error_client():
    app = FastAPI()
    register_exception_handlers(app)

    errors = {
        "expired": LedgerTokenExpiredError(),
        "missing": LedgerTokenNotFoundError(),
        "mismatch": LedgerTokenTypeMismatchError("password_reset", "email_verify"),
        "storage": StorageError("Storage failure on users", table="users"),
        "forbidden": AccessDeniedError(),
        "gone": ResourceNotFoundError("task", "t1"),
    }

    @app.get("/raise/{name}")
    async def raise_error(name: str):
        raise errors[name]

    @app.get("/crash")
    async def crash():
        raise RuntimeError("secret internals")

    return TestClient(app, raise_server_exceptions=False)


class TestExceptionHandlers:
    def test_ledger_errors_render_identically(self, error_client):
        bodies = [error_client.get(f"/raise/{name}") for name in ("expired", "missing", "mismatch")]

        assert {r.status_code for r in bodies} == {401}
        assert bodies[0].json() == bodies[1].json() == bodies[2].json()
        assert bodies[0].json() == {
            "error": "Unauthorized",
            "detail": "Invalid or expired token",
            "code": "INVALID_TOKEN",
        }
        assert bodies[0].headers["WWW-Authenticate"] == "Bearer"

    def test_storage_details_hidden(self, error_client):
        response = error_client.get("/raise/storage")
        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error"
        assert response.json()["code"] == "STORAGE_FAILURE"

    def test_forbidden_and_not_found_differ(self, error_client):
        forbidden = error_client.get("/raise/forbidden")
        gone = error_client.get("/raise/gone")

        assert forbidden.status_code == 403
        assert forbidden.json()["code"] == "ACCESS_DENIED"
        assert "WWW-Authenticate" not in forbidden.headers
        assert gone.status_code == 404
        assert gone.json()["code"] == "RESOURCE_NOT_FOUND"

    def test_unhandled_exception(self, error_client):
        response = error_client.get("/crash")
        assert response.status_code == 500
        assert "secret internals" not in response.text
        assert response.json()["code"] == "INTERNAL_ERROR"
