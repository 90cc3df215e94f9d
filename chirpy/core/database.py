"""
JSON-file record store for users, chirps and revoked refresh tokens.

The whole state lives in memory and is mirrored to a single JSON file. Every
mutation takes the exclusive lock, writes the complete candidate state to disk
(truncate + rewrite, then fsync) and only then installs it in memory, so a
failed write leaves the store unchanged. Reads take the shared lock.

Known gap: a crash between truncate and write leaves an empty or partial file.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Literal

from fastapi import Request
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from chirpy.core.errors import (
    DuplicateEmailError,
    ForbiddenError,
    MalformedError,
    NotFoundError,
    StoreClosedError,
    StoreLoadError,
    StoreWriteError,
    TooLongError,
)
from chirpy.core.rwlock import ReadWriteLock
from chirpy.core.security import BCRYPT_ROUNDS, hash_password
from chirpy.models import Chirp, User
from chirpy.services.content_filter import clean_body

logger = logging.getLogger(__name__)

MAX_CHIRP_LENGTH = 140

ChirpOrder = Literal["asc", "desc"]


class _Snapshot(BaseModel):
    """On-disk layout: users and chirps keyed by id, revoked tokens as a list."""

    users: dict[int, User] = Field(default_factory=dict)
    chirps: dict[int, Chirp] = Field(default_factory=dict)
    revoked_refresh_tokens: list[str] = Field(default_factory=list)

    @field_validator("revoked_refresh_tokens", mode="before")
    @classmethod
    def accept_token_mapping(cls, v: Any) -> Any:
        # Older files stored the set as {"<token>": true}.
        if isinstance(v, dict):
            return [token for token, revoked in v.items() if revoked]
        return v

    @model_validator(mode="after")
    def keys_match_ids(self) -> _Snapshot:
        for key, user in self.users.items():
            if key != user.id:
                raise ValueError(f"user key {key} does not match id {user.id}")
        for key, chirp in self.chirps.items():
            if key != chirp.id:
                raise ValueError(f"chirp key {key} does not match id {chirp.id}")
        return self


def _next_id(records: Mapping[int, Any]) -> int:
    return max(records, default=0) + 1


def _serialize(
    users: Mapping[int, User],
    chirps: Mapping[int, Chirp],
    revoked: frozenset[str],
) -> str:
    """Render the full state with a fixed key order so the file diffs cleanly."""
    doc = {
        "users": {str(uid): users[uid].model_dump() for uid in sorted(users)},
        "chirps": {str(cid): chirps[cid].model_dump() for cid in sorted(chirps)},
        "revoked_refresh_tokens": sorted(revoked),
    }
    return json.dumps(doc, indent=2) + "\n"


def _load(path: Path) -> _Snapshot:
    """Read the backing file, creating it if absent. Empty file means empty store."""
    try:
        path.touch(exist_ok=True)
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StoreLoadError(f"Cannot read database file {path}: {e}") from e
    if not raw.strip():
        return _Snapshot()
    try:
        return _Snapshot.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        raise StoreLoadError(f"Database file {path} is not a valid store: {e}") from e


def _sorted_chirps(chirps: list[Chirp], order: str) -> list[Chirp]:
    if order not in ("asc", "desc"):
        raise MalformedError(f"Invalid sort order {order!r}; use 'asc' or 'desc'.")
    return sorted(chirps, key=lambda c: c.id, reverse=order == "desc")


class ChirpyDB:
    """
    Durable, thread-safe store. Create with ChirpyDB.open(path); close() when done.

    Returned records are frozen, so callers cannot mutate store state through them.
    """

    def __init__(
        self,
        path: Path,
        snapshot: _Snapshot,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        self._path = path
        self._bcrypt_rounds = bcrypt_rounds
        self._lock = ReadWriteLock()
        self._closed = False
        self._users: dict[int, User] = dict(snapshot.users)
        self._chirps: dict[int, Chirp] = dict(snapshot.chirps)
        self._revoked: frozenset[str] = frozenset(snapshot.revoked_refresh_tokens)

    @classmethod
    def open(cls, path: str | os.PathLike[str], bcrypt_rounds: int = BCRYPT_ROUNDS) -> ChirpyDB:
        """Load the backing file into memory. Raises StoreLoadError if it is unreadable."""
        db_path = Path(path)
        snapshot = _load(db_path)
        logger.info(
            "Opened database",
            extra={
                "path": str(db_path),
                "users": len(snapshot.users),
                "chirps": len(snapshot.chirps),
                "revoked_tokens": len(snapshot.revoked_refresh_tokens),
            },
        )
        return cls(db_path, snapshot, bcrypt_rounds=bcrypt_rounds)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Waits for in-flight operations, then rejects all further ones."""
        with self._lock.write_locked():
            if self._closed:
                return
            self._closed = True
        logger.info("Closed database", extra={"path": str(self._path)})

    def __enter__(self) -> ChirpyDB:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- locking and persistence -------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError("Database is closed.")

    @contextmanager
    def _reading(self) -> Iterator[None]:
        with self._lock.read_locked():
            self._ensure_open()
            yield

    @contextmanager
    def _writing(self) -> Iterator[None]:
        with self._lock.write_locked():
            self._ensure_open()
            yield

    def _commit(
        self,
        users: dict[int, User] | None = None,
        chirps: dict[int, Chirp] | None = None,
        revoked: frozenset[str] | None = None,
    ) -> None:
        """Persist the candidate state, then install it. Caller holds the write lock."""
        users = self._users if users is None else users
        chirps = self._chirps if chirps is None else chirps
        revoked = self._revoked if revoked is None else revoked
        data = _serialize(users, chirps, revoked)
        try:
            with open(self._path, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            logger.error("Database write failed", extra={"path": str(self._path), "reason": str(e)})
            raise StoreWriteError("Could not save changes to the database.") from e
        self._users = users
        self._chirps = chirps
        self._revoked = revoked

    def _email_owner(self, email: str) -> int | None:
        for user in self._users.values():
            if user.email == email:
                return user.id
        return None

    # -- users ---------------------------------------------------------------

    def create_user(self, email: str, password: str) -> User:
        """Register a new user. Raises DuplicateEmailError if the email is taken."""
        password_hash = hash_password(password, rounds=self._bcrypt_rounds)
        with self._writing():
            if self._email_owner(email) is not None:
                raise DuplicateEmailError("Email is already in use.")
            user = User(
                id=_next_id(self._users),
                email=email,
                password_hash=password_hash,
                is_chirpy_red=False,
            )
            self._commit(users={**self._users, user.id: user})
        logger.info("Created user", extra={"user_id": user.id})
        return user

    def update_user(self, user_id: int, email: str, password: str) -> User:
        """Replace email and password of an existing user; the password is always re-hashed."""
        password_hash = hash_password(password, rounds=self._bcrypt_rounds)
        with self._writing():
            current = self._users.get(user_id)
            if current is None:
                raise NotFoundError(f"User with ID {user_id} not found.")
            owner = self._email_owner(email)
            if owner is not None and owner != user_id:
                raise DuplicateEmailError("Email is already in use.")
            user = current.model_copy(update={"email": email, "password_hash": password_hash})
            self._commit(users={**self._users, user_id: user})
        logger.info("Updated user", extra={"user_id": user_id})
        return user

    def upgrade_user(self, user_id: int) -> None:
        """Set is_chirpy_red. Idempotent."""
        with self._writing():
            current = self._users.get(user_id)
            if current is None:
                raise NotFoundError(f"User with ID {user_id} not found.")
            if current.is_chirpy_red:
                return
            user = current.model_copy(update={"is_chirpy_red": True})
            self._commit(users={**self._users, user_id: user})
        logger.info("Upgraded user to Chirpy Red", extra={"user_id": user_id})

    def get_user(self, user_id: int) -> User:
        with self._reading():
            user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found.")
        return user

    def get_user_by_email(self, email: str) -> User:
        """Exact, case-sensitive lookup."""
        with self._reading():
            user_id = self._email_owner(email)
            user = self._users.get(user_id) if user_id is not None else None
        if user is None:
            raise NotFoundError("No user with that email.")
        return user

    def list_users(self) -> list[User]:
        """All users, in no particular order."""
        with self._reading():
            return list(self._users.values())

    # -- chirps --------------------------------------------------------------

    def create_chirp(self, body: str, author_id: int) -> Chirp:
        """
        Store a new chirp after masking banned words.

        Length is checked on the raw body; rejected bodies are never stored.
        """
        if len(body) > MAX_CHIRP_LENGTH:
            raise TooLongError("Chirp is too long.")
        cleaned = clean_body(body)
        with self._writing():
            chirp = Chirp(id=_next_id(self._chirps), body=cleaned, author_id=author_id)
            self._commit(chirps={**self._chirps, chirp.id: chirp})
        logger.info("Created chirp", extra={"chirp_id": chirp.id, "author_id": author_id})
        return chirp

    def delete_chirp(self, chirp_id: int, author_id: int | None = None) -> None:
        """
        Remove a chirp. When author_id is given, the chirp must belong to that
        author or ForbiddenError is raised; the check and the delete share one
        exclusive lock.
        """
        with self._writing():
            chirp = self._chirps.get(chirp_id)
            if chirp is None:
                raise NotFoundError(f"Chirp with ID {chirp_id} not found.")
            if author_id is not None and chirp.author_id != author_id:
                logger.info(
                    "Chirp delete forbidden",
                    extra={"chirp_id": chirp_id, "user_id": author_id},
                )
                raise ForbiddenError("You can't delete this chirp.")
            chirps = {cid: c for cid, c in self._chirps.items() if cid != chirp_id}
            self._commit(chirps=chirps)
        logger.info("Deleted chirp", extra={"chirp_id": chirp_id})

    def get_chirp(self, chirp_id: int) -> Chirp:
        with self._reading():
            chirp = self._chirps.get(chirp_id)
        if chirp is None:
            raise NotFoundError(f"Chirp with ID {chirp_id} not found.")
        return chirp

    def list_chirps(self, order: ChirpOrder = "asc") -> list[Chirp]:
        """All chirps sorted by id."""
        with self._reading():
            chirps = list(self._chirps.values())
        return _sorted_chirps(chirps, order)

    def list_chirps_by_author(self, author_id: int, order: ChirpOrder = "asc") -> list[Chirp]:
        """Chirps of one author sorted by id; empty for unknown authors."""
        with self._reading():
            chirps = [c for c in self._chirps.values() if c.author_id == author_id]
        return _sorted_chirps(chirps, order)

    # -- refresh token revocation ---------------------------------------------

    def is_refresh_token_valid(self, token: str) -> bool:
        """False once the token has been revoked. Does not check signature or expiry."""
        with self._reading():
            return token not in self._revoked

    def revoke_refresh_token(self, token: str) -> None:
        """Add the token to the revoked set. Idempotent; entries are never removed."""
        with self._writing():
            if token in self._revoked:
                return
            self._commit(revoked=self._revoked | {token})
        logger.info("Revoked refresh token")


def get_db(request: Request) -> ChirpyDB:
    """Dependency that returns the store opened by the app lifespan."""
    return request.app.state.db
