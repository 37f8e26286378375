"""
Single-use token ledger.

Durable record of pending email verifications, pending password resets
and revoked bearer tokens, all stored in one tokens table keyed by the
unique token string and discriminated by type.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.exceptions import ValidationError
from shared.repository import BaseRepository, FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION

from .exceptions import (
    LedgerTokenExpiredError,
    LedgerTokenNotFoundError,
    LedgerTokenTypeMismatchError,
    UserNotFoundError,
)
from .models import LedgerToken, TokenType

logger = logging.getLogger(__name__)

TOKENS_TABLE = "tokens"


class TokenLedger(BaseRepository[LedgerToken]):
    """
    Ledger of email_verify, password_reset and jwt_blacklist rows.

    email_verify and password_reset rows are consumed at most once;
    jwt_blacklist rows are never consumed and act as a negative cache.
    Expired rows are not reaped; they stay until a lookup finds them stale.
    """

    def __init__(
        self,
        db: Client,
        verification_ttl: timedelta = timedelta(hours=24),
        reset_ttl: timedelta = timedelta(hours=24),
        blacklist_ttl: timedelta = timedelta(hours=24),
        token_bytes: int = 32,
    ) -> None:
        super().__init__(db)
        if token_bytes < 32:
            raise ValueError("Ledger tokens need at least 32 bytes of entropy")
        self._ttls = {
            TokenType.EMAIL_VERIFY: verification_ttl,
            TokenType.PASSWORD_RESET: reset_ttl,
            TokenType.JWT_BLACKLIST: blacklist_ttl,
        }
        self._token_bytes = token_bytes

    # -------------------------------------------------------------------------
    # Issuance
    # -------------------------------------------------------------------------

    def issue_verification(self, user_id: str) -> LedgerToken:
        """Store a fresh email_verify token for the user."""
        return self._insert(
            user_id,
            secrets.token_hex(self._token_bytes),
            TokenType.EMAIL_VERIFY,
            self._ttls[TokenType.EMAIL_VERIFY],
        )

    def issue_reset(self, user_id: str) -> LedgerToken:
        """Store a fresh password_reset token for the user."""
        return self._insert(
            user_id,
            secrets.token_hex(self._token_bytes),
            TokenType.PASSWORD_RESET,
            self._ttls[TokenType.PASSWORD_RESET],
        )

    def blacklist(
        self,
        token: str,
        user_id: str,
        ttl: Optional[timedelta] = None,
    ) -> LedgerToken:
        """
        Revoke a bearer token by its exact string.

        The blacklist row lives for its own ttl, independent of the
        bearer token's exp claim.
        """
        return self._insert(
            user_id,
            token,
            TokenType.JWT_BLACKLIST,
            ttl or self._ttls[TokenType.JWT_BLACKLIST],
        )

    # -------------------------------------------------------------------------
    # Lookup and consumption
    # -------------------------------------------------------------------------

    def consume(self, token: str, expected_type: TokenType) -> str:
        """
        Atomically delete a live token of the expected type.

        The delete is a single conditional statement returning the removed
        row, so two concurrent calls can never both succeed.

        Returns:
            The owning user's ID

        Raises:
            LedgerTokenNotFoundError: No row with that token string
            LedgerTokenExpiredError: Row exists but is expired (left in place)
            LedgerTokenTypeMismatchError: Row exists with a different type
        """
        if expected_type is TokenType.JWT_BLACKLIST:
            raise ValueError("Blacklist entries are never consumed")

        now = datetime.now(timezone.utc)
        result = self._execute(
            TOKENS_TABLE,
            self._db.table(TOKENS_TABLE)
            .delete()
            .eq("token", token)
            .eq("type", expected_type.value)
            .gt("expires_at", now.isoformat()),
        )
        if result.data:
            return str(result.data[0]["user_id"])

        # Nothing deleted: classify the failure
        raise self._unusable_error(self._find(token), expected_type, now)

    def peek(self, token: str, expected_type: TokenType) -> LedgerToken:
        """
        Validate a token without consuming it.

        Raises the same errors as consume().
        """
        now = datetime.now(timezone.utc)
        row = self._find(token)
        if row is not None and row.type is expected_type and not row.is_expired(now):
            return row
        raise self._unusable_error(row, expected_type, now)

    def is_blacklisted(self, token: str) -> bool:
        """Existence check scoped to jwt_blacklist rows."""
        result = self._execute(
            TOKENS_TABLE,
            self._db.table(TOKENS_TABLE)
            .select("id")
            .eq("token", token)
            .eq("type", TokenType.JWT_BLACKLIST.value)
            .limit(1),
        )
        return bool(result.data)

    def revoke_outstanding(self, user_id: str, token_type: TokenType) -> int:
        """
        Delete every remaining token of a type for a user.

        Returns:
            Number of rows removed
        """
        if token_type is TokenType.JWT_BLACKLIST:
            raise ValueError("Blacklist entries are never revoked")
        result = self._execute(
            TOKENS_TABLE,
            self._db.table(TOKENS_TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("type", token_type.value),
        )
        return len(result.data or [])

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _insert(
        self,
        user_id: str,
        token: str,
        token_type: TokenType,
        ttl: timedelta,
    ) -> LedgerToken:
        created_at = datetime.now(timezone.utc)
        expires_at = created_at + ttl
        if expires_at <= created_at:
            raise ValidationError(
                "Token expiry must be after its creation time",
                code="INVALID_TOKEN_EXPIRY",
            )

        data = {
            "user_id": user_id,
            "token": token,
            "type": token_type.value,
            "expires_at": expires_at.isoformat(),
            "created_at": created_at.isoformat(),
            "updated_at": created_at.isoformat(),
        }
        try:
            result = self._db.table(TOKENS_TABLE).insert(data).execute()
        except APIError as e:
            if e.code == FOREIGN_KEY_VIOLATION:
                raise UserNotFoundError(user_id) from e
            if e.code == UNIQUE_VIOLATION and token_type is TokenType.JWT_BLACKLIST:
                existing = self._find(token)
                if existing is not None and existing.type is TokenType.JWT_BLACKLIST:
                    logger.info(f"Token for user {user_id} was already blacklisted")
                    return existing
            raise self._storage_error(TOKENS_TABLE, e) from e
        return self._map_to_token(result.data[0])

    def _find(self, token: str) -> Optional[LedgerToken]:
        result = self._execute(
            TOKENS_TABLE,
            self._db.table(TOKENS_TABLE).select("*").eq("token", token).limit(1),
        )
        if not result.data:
            return None
        return self._map_to_token(result.data[0])

    def _unusable_error(
        self,
        row: Optional[LedgerToken],
        expected_type: TokenType,
        now: datetime,
    ) -> Exception:
        if row is not None and row.type is not expected_type:
            return LedgerTokenTypeMismatchError(expected_type.value, row.type.value)
        if row is not None and row.is_expired(now):
            return LedgerTokenExpiredError()
        # Absent, or consumed by a concurrent caller since the delete
        return LedgerTokenNotFoundError()

    def _map_to_token(self, data: dict[str, Any]) -> LedgerToken:
        return LedgerToken(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            token=data["token"],
            type=TokenType(data["type"]),
            expires_at=data["expires_at"],
            created_at=data["created_at"],
        )
