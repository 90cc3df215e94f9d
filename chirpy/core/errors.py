"""Error taxonomy shared by the record store, token service and auth guard.

Every error carries a human-readable message and the HTTP status the API layer
should answer with. Core code raises these; it never builds HTTP responses.
"""


class ChirpyError(Exception):
    """Base class for all caller-visible failures."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class DuplicateEmailError(ChirpyError):
    """Raised when an email is already registered to another user."""

    status_code = 409


class NotFoundError(ChirpyError):
    """Raised when a user or chirp id (or email) does not exist."""

    status_code = 404


class TooLongError(ChirpyError):
    """Raised when a chirp body exceeds the maximum length."""

    status_code = 400


class UnauthorizedError(ChirpyError):
    """Missing, invalid or expired credential, or a bad API key."""

    status_code = 401


class InvalidSignatureError(UnauthorizedError):
    """Token signature does not verify, or it was signed with an unexpected algorithm."""


class TokenExpiredError(UnauthorizedError):
    """Token signature is valid but its exp claim has passed."""


class ForbiddenError(ChirpyError):
    """Authenticated, but not entitled to act on the resource."""

    status_code = 403


class WrongRoleError(ChirpyError):
    """An access token was presented where a refresh token is required, or vice versa."""

    status_code = 401


class MalformedError(ChirpyError):
    """Input that cannot be decoded."""

    status_code = 400


class MalformedTokenError(MalformedError, UnauthorizedError):
    """Bearer credential is not a decodable token or lacks required claims."""

    status_code = 401


class StoreClosedError(ChirpyError):
    """Raised when an operation is attempted on a closed store."""

    status_code = 503


class StoreLoadError(ChirpyError):
    """Backing file exists but cannot be read or parsed. Fatal at startup."""

    status_code = 500


class StoreWriteError(ChirpyError):
    """Backing file could not be rewritten; the mutation was not applied."""

    status_code = 500
