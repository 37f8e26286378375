"""
Credential store.

Owns password hashing and verification on top of the user repository.
The password column only ever receives a hash produced here.
"""

import logging
from typing import Optional

from shared.models import Role

from .exceptions import DuplicateIdentityError, UserNotFoundError
from .models import User
from .passwords import PasswordHasher
from .repository import UserRepository

logger = logging.getLogger(__name__)


class CredentialStore:
    """User identity, hashed password, role and email-verified flag."""

    def __init__(self, users: UserRepository, hasher: PasswordHasher):
        self._users = users
        self._hasher = hasher

    def create_user(
        self,
        email: str,
        password: str,
        role: Role,
        username: Optional[str] = None,
    ) -> User:
        """
        Create an unverified user with a freshly hashed password.

        Raises:
            DuplicateIdentityError: If the email or username already exists
        """
        if self._users.get_by_email(email) is not None:
            raise DuplicateIdentityError("email")
        if username and self._users.get_by_username(username) is not None:
            raise DuplicateIdentityError("username")

        # The unique indexes still guard the race between the checks and the insert
        return self._users.create(
            email=email,
            password_hash=self._hasher.hash(password),
            role=role,
            username=username,
        )

    def update_password(self, user: User, new_password: str) -> User:
        """Re-hash unconditionally; the old hash is discarded."""
        updated = self._users.update(
            user.id, {"password_hash": self._hasher.hash(new_password)}
        )
        if updated is None:
            raise UserNotFoundError(user.id)
        return updated

    def verify_password(self, user: User, candidate: str) -> bool:
        """Constant-time check; a mismatch is not exceptional."""
        return self._hasher.verify(candidate, user.password_hash)

    def mark_email_verified(self, user_id: str) -> User:
        updated = self._users.update(user_id, {"is_email_verified": True})
        if updated is None:
            raise UserNotFoundError(user_id)
        return updated

    def update_profile(
        self,
        user: User,
        email: Optional[str] = None,
        username: Optional[str] = None,
    ) -> tuple[User, bool]:
        """
        Change email and/or username.

        A changed email clears the verified flag.

        Returns:
            The updated user and whether the email changed.
        """
        fields: dict[str, object] = {}
        email_changed = email is not None and email != user.email

        if username is not None and username != user.username:
            existing = self._users.get_by_username(username)
            if existing is not None and existing.id != user.id:
                raise DuplicateIdentityError("username")
            fields["username"] = username

        if email_changed:
            if self._users.get_by_email(email) is not None:
                raise DuplicateIdentityError("email")
            fields["email"] = email
            fields["is_email_verified"] = False

        if not fields:
            return user, False

        updated = self._users.update(user.id, fields)
        if updated is None:
            raise UserNotFoundError(user.id)
        return updated, email_changed

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get_by_id(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self._users.get_by_email(email)

    def delete_user(self, user_id: str) -> None:
        """Soft-delete an account."""
        if not self._users.soft_delete(user_id):
            raise UserNotFoundError(user_id)
        logger.info(f"User account deleted: {user_id}")
