"""
Bearer token issuance and validation.

Tokens are HMAC-signed JWTs carrying the user id and role. Validity is
stateless; revocation is handled separately by the token ledger.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.models import Role

from .exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from .models import IssuedToken, SessionClaims

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class SessionTokenIssuer:
    """
    Signs and verifies bearer tokens with a process-wide secret.

    Rotating the secret invalidates every outstanding token.
    """

    def __init__(
        self,
        secret: str,
        issuer: str,
        ttl: timedelta = timedelta(hours=24),
        algorithm: str = "HS256",
    ):
        if not secret:
            raise RuntimeError(
                "JWT secret missing. Set the JWT_SECRET environment variable."
            )
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self._issuer = issuer
        self._ttl = ttl
        self._algorithm = algorithm

    def issue(
        self,
        user_id: str,
        role: Role,
        now: Optional[datetime] = None,
    ) -> IssuedToken:
        """
        Sign a token for the user.

        Args:
            user_id: Subject of the token
            role: Role claim
            now: Issuance time (defaults to the current time)
        """
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self._ttl
        payload = {
            "sub": user_id,
            "role": role.value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": self._issuer,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(
            token=token,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def validate(self, token: Optional[str]) -> SessionClaims:
        """
        Verify signature, algorithm, issuer and expiry.

        Only the configured HMAC algorithm is accepted, so "none" and
        mismatched-algorithm tokens are rejected.

        Raises:
            MissingTokenError: If no token was given
            ExpiredTokenError: If the token is past its exp claim
            InvalidTokenError: For any other defect (signature, claims, format)
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["sub", "role", "iat", "exp", "iss"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        try:
            return SessionClaims(**payload)
        except PydanticValidationError:
            raise InvalidTokenError("Invalid token: unexpected claims")


def mask_token(token: str) -> str:
    """Mask a token for safe logging."""
    if len(token) <= 10:
        return "****"
    return token[:5] + "****" + token[-5:]
