"""Authentication and authorization over the token service and record store."""

import hmac
import logging

from pydantic import BaseModel

from chirpy.core.database import ChirpyDB
from chirpy.core.errors import NotFoundError, UnauthorizedError
from chirpy.core.security import verify_password
from chirpy.core.tokens import TokenService
from chirpy.models import Chirp, User

logger = logging.getLogger(__name__)

SCHEME_BEARER = "Bearer"
SCHEME_API_KEY = "ApiKey"

POLKA_UPGRADE_EVENT = "user.upgraded"


class LoginResult(BaseModel):
    """Authenticated user plus a fresh access/refresh token pair."""

    user: User
    access_token: str
    refresh_token: str


def extract_credential(authorization: str | None, scheme: str) -> str:
    """
    Return the credential from an "Authorization: <scheme> <value>" header.

    The scheme word is matched case-insensitively. Raises UnauthorizedError if the
    header is missing, uses another scheme, or has no value.
    """
    if not authorization:
        raise UnauthorizedError("No credentials provided.")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != scheme.lower():
        raise UnauthorizedError(f"Authorization header must be '{scheme} <credential>'.")
    return parts[1]


class AuthGuard:
    """Entry point for every protected operation; holds no state of its own."""

    def __init__(self, db: ChirpyDB, tokens: TokenService, polka_key: str) -> None:
        self._db = db
        self._tokens = tokens
        self._polka_key = polka_key

    def authenticate(self, authorization: str | None) -> int:
        """Validate a bearer access token and return its user id."""
        token = extract_credential(authorization, SCHEME_BEARER)
        return self._tokens.validate_access(token).user_id

    def login(self, email: str, password: str) -> LoginResult:
        """Check email/password; unknown email and wrong password fail identically."""
        try:
            user = self._db.get_user_by_email(email)
        except NotFoundError:
            logger.info("Login rejected: unknown email")
            raise UnauthorizedError("Incorrect email or password.") from None
        if not verify_password(password, user.password_hash):
            logger.info("Login rejected: bad password", extra={"user_id": user.id})
            raise UnauthorizedError("Incorrect email or password.")
        return LoginResult(
            user=user,
            access_token=self._tokens.issue_access_token(user.id),
            refresh_token=self._tokens.issue_refresh_token(user.id),
        )

    def update_user(self, authorization: str | None, email: str, password: str) -> User:
        user_id = self.authenticate(authorization)
        return self._db.update_user(user_id, email, password)

    def create_chirp(self, authorization: str | None, body: str) -> Chirp:
        user_id = self.authenticate(authorization)
        return self._db.create_chirp(body, author_id=user_id)

    def delete_chirp(self, authorization: str | None, chirp_id: int) -> None:
        """Only the author may delete; raises ForbiddenError for anyone else."""
        user_id = self.authenticate(authorization)
        self._db.delete_chirp(chirp_id, author_id=user_id)

    def refresh(self, authorization: str | None) -> str:
        """Exchange an unrevoked refresh token for a new access token. No rotation."""
        token = extract_credential(authorization, SCHEME_BEARER)
        claims = self._tokens.validate_refresh(token)
        if not self._db.is_refresh_token_valid(token):
            logger.info("Refresh rejected: token revoked", extra={"user_id": claims.user_id})
            raise UnauthorizedError("Refresh token has been revoked.")
        return self._tokens.issue_access_token(claims.user_id)

    def revoke(self, authorization: str | None) -> None:
        """Revoke a refresh token. Revoking twice is not an error."""
        token = extract_credential(authorization, SCHEME_BEARER)
        self._tokens.validate_refresh(token)
        self._db.revoke_refresh_token(token)

    def handle_polka_event(self, authorization: str | None, event: str, user_id: int) -> bool:
        """
        Apply a Polka webhook event; returns True if a user was upgraded.

        Events other than user.upgraded are acknowledged and ignored.
        """
        key = extract_credential(authorization, SCHEME_API_KEY)
        if not self._polka_key or not hmac.compare_digest(
            key.encode("utf-8"), self._polka_key.encode("utf-8")
        ):
            logger.info("Polka webhook rejected: bad API key")
            raise UnauthorizedError("Invalid API key.")
        if event != POLKA_UPGRADE_EVENT:
            return False
        self._db.upgrade_user(user_id)
        return True
