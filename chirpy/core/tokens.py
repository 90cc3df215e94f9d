"""JWT access and refresh token issuance and validation."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt
from pydantic import BaseModel

from chirpy.core.errors import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
    WrongRoleError,
)

JWT_ALGORITHM = "HS256"

# The iss claim doubles as the role discriminator.
ISSUER_ACCESS = "chirpy-access"
ISSUER_REFRESH = "chirpy-refresh"

ACCESS_TOKEN_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(hours=1440)

_REQUIRED_CLAIMS = ["exp", "iat", "iss", "sub"]


class TokenClaims(BaseModel):
    """Validated claims of a Chirpy token."""

    user_id: int
    issuer: str
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """
    Signs and validates bearer tokens with a shared HS256 secret.

    now is injectable so tests can mint tokens that are already expired.
    """

    def __init__(
        self,
        secret: str,
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must be non-empty")
        self._secret = secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._now = now

    def _issue(self, user_id: int, issuer: str, ttl: timedelta) -> str:
        issued_at = self._now()
        payload: dict[str, Any] = {
            "iss": issuer,
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + ttl,
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def issue_access_token(self, user_id: int) -> str:
        return self._issue(user_id, ISSUER_ACCESS, self._access_ttl)

    def issue_refresh_token(self, user_id: int) -> str:
        return self._issue(user_id, ISSUER_REFRESH, self._refresh_ttl)

    def validate(self, token: str) -> TokenClaims:
        """
        Verify signature, algorithm and expiry; return the decoded claims.

        Raises InvalidSignatureError, TokenExpiredError or MalformedTokenError.
        Does not look at the role; see validate_access / validate_refresh.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired.") from e
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise InvalidSignatureError("Token signature is invalid.") from e
        except jwt.PyJWTError as e:
            raise MalformedTokenError(f"Token is malformed: {e}") from e

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise MalformedTokenError("Token subject is not a user id.") from e
        return TokenClaims(
            user_id=user_id,
            issuer=str(payload["iss"]),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )

    def _validate_role(self, token: str, issuer: str) -> TokenClaims:
        claims = self.validate(token)
        if claims.issuer != issuer:
            raise WrongRoleError(
                f"Expected a {issuer} token, got {claims.issuer!r}."
            )
        return claims

    def validate_access(self, token: str) -> TokenClaims:
        return self._validate_role(token, ISSUER_ACCESS)

    def validate_refresh(self, token: str) -> TokenClaims:
        return self._validate_role(token, ISSUER_REFRESH)
