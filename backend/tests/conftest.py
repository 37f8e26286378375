"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt  # PyJWT
import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import ServiceContainer, get_container, reset_container
from modules.auth.models import User
from modules.auth.passwords import PasswordHasher
from modules.auth.repository import UserRepository
from shared.config import Settings, get_settings
from shared.models import Role

from .fakes import FakeSupabase, RecordingEmailSender


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"
TEST_ISSUER = "teamdesk"
ADMIN_CODE = "admin-invite"
MANAGER_CODE = "manager-invite"
TEST_PASSWORD = "correct-horse"


def create_test_token(
    user_id: str = "test-user-123",
    role: str = "member",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
    issuer: str = TEST_ISSUER,
) -> str:
    """
    Create a test JWT token shaped like the ones the API issues.

    Args:
        user_id: User ID to include in the token
        role: Role claim
        expired: If True, creates an expired token
        secret: Signing secret
        issuer: iss claim
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "iss": issuer,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@dataclass
class TestUser:
    """A stored user plus a valid bearer token for them."""

    __test__ = False

    user: User
    token: str

    @property
    def id(self) -> str:
        return self.user.id

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the cached settings and container before and after each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        jwt_issuer=TEST_ISSUER,
        bcrypt_rounds=4,
        admin_invitation_code=ADMIN_CODE,
        manager_invitation_code=MANAGER_CODE,
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-key",
    )


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def container(settings, db, email_sender) -> ServiceContainer:
    return ServiceContainer(settings=settings, db=db, email_sender=email_sender)


@pytest.fixture
def app(settings, container):
    application = create_app(settings)
    application.dependency_overrides[get_container] = lambda: container
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_user(db, hasher):
    """
    Factory that stores a user directly and signs a token for them.

    Usage:
        alice = make_user("alice@example.com", role=Role.MANAGER)
        client.get("/api/users/me", headers=alice.headers)
    """
    users = UserRepository(db)

    def _make(
        email: str,
        role: Role = Role.MEMBER,
        verified: bool = True,
        password: str = TEST_PASSWORD,
        username: Optional[str] = None,
    ) -> TestUser:
        user = users.create(email, hasher.hash(password), role, username=username)
        if verified:
            user = users.update(user.id, {"is_email_verified": True})
        return TestUser(user=user, token=create_test_token(user.id, role.value))

    return _make
