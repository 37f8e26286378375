"""
Password hashing.

Hash & verify passwords with bcrypt through passlib; raw passwords are
never stored or returned.
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Salted adaptive hashing (bcrypt) with a configurable cost."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, raw_password: str) -> str:
        """Hash a plaintext password. Every call uses a fresh salt."""
        return self._context.hash(raw_password)

    def verify(self, raw_password: str, hashed_password: str) -> bool:
        """
        Check a candidate against a stored hash in constant time.

        A mismatch returns False. A stored value that is not a recognised
        hash also returns False and is logged, since it can never match.
        """
        try:
            return self._context.verify(raw_password, hashed_password)
        except ValueError:
            logger.error("Stored password hash is not a recognised bcrypt hash")
            return False

