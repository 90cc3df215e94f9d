"""Unit tests for chirpy.services.auth_guard: header parsing, ownership, refresh/revoke and Polka."""

import tempfile
import unittest
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import patch

from chirpy.core.database import ChirpyDB
from chirpy.core.errors import (
    ForbiddenError,
    NotFoundError,
    TokenExpiredError,
    UnauthorizedError,
    WrongRoleError,
)
from chirpy.core.tokens import TokenService
from chirpy.services.auth_guard import AuthGuard, extract_credential

SECRET = "test-secret-that-is-at-least-32-bytes-long"
POLKA_KEY = "f271c81ff7084ee5b99a5091b42d486e"


def _bearer(token: str) -> str:
    return f"Bearer {token}"


class GuardTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "database.json"
        self.db = ChirpyDB.open(self.path, bcrypt_rounds=4)
        self.tokens = TokenService(SECRET)
        self.guard = AuthGuard(self.db, self.tokens, POLKA_KEY)

    def tearDown(self) -> None:
        self.db.close()
        self._tmp.cleanup()

    def access_header(self, user_id: int) -> str:
        return _bearer(self.tokens.issue_access_token(user_id))


class TestExtractCredential(unittest.TestCase):
    def test_bearer(self) -> None:
        self.assertEqual(extract_credential("Bearer abc", "Bearer"), "abc")
        self.assertEqual(extract_credential("bearer abc", "Bearer"), "abc")

    def test_api_key(self) -> None:
        self.assertEqual(extract_credential("ApiKey k1", "ApiKey"), "k1")

    def test_missing_or_malformed(self) -> None:
        for header in (None, "", "Bearer", "abc", "Bearer a b", "ApiKey k1"):
            with self.subTest(header=header):
                with self.assertRaises(UnauthorizedError):
                    extract_credential(header, "Bearer")


class TestScenario(GuardTestCase):
    def test_create_filter_forbid_delete(self) -> None:
        user = self.db.create_user("a@x.com", "pw1")
        self.assertEqual(user.id, 1)
        chirp = self.guard.create_chirp(self.access_header(1), "this is a kerfuffle")
        self.assertEqual(chirp.id, 1)
        self.assertEqual(chirp.body, "this is a ****")
        with self.assertRaises(ForbiddenError):
            self.guard.delete_chirp(self.access_header(2), 1)
        self.guard.delete_chirp(self.access_header(1), 1)
        with self.assertRaises(NotFoundError):
            self.db.get_chirp(1)


class TestProtectedChirps(GuardTestCase):
    def test_create_requires_token(self) -> None:
        with self.assertRaises(UnauthorizedError):
            self.guard.create_chirp(None, "hello")
        self.assertEqual(self.db.list_chirps(), [])

    def test_create_rejects_refresh_token(self) -> None:
        with self.assertRaises(WrongRoleError):
            self.guard.create_chirp(_bearer(self.tokens.issue_refresh_token(1)), "hello")

    def test_create_rejects_expired_token(self) -> None:
        old = TokenService(SECRET, now=lambda: datetime.now(UTC) - timedelta(hours=2))
        with self.assertRaises(TokenExpiredError):
            self.guard.create_chirp(_bearer(old.issue_access_token(1)), "hello")

    def test_delete_missing_chirp(self) -> None:
        with self.assertRaises(NotFoundError):
            self.guard.delete_chirp(self.access_header(1), 99)

    def test_delete_after_id_reuse_is_forbidden(self) -> None:
        self.db.create_chirp("first", author_id=1)
        validate_access = self.tokens.validate_access

        def validate_then_interleave(token: str):
            claims = validate_access(token)
            # Another request from author 1 deletes chirp 1, then author 2 reuses the id.
            self.db.delete_chirp(1)
            self.assertEqual(self.db.create_chirp("second", author_id=2).id, 1)
            return claims

        with patch.object(self.tokens, "validate_access", side_effect=validate_then_interleave):
            with self.assertRaises(ForbiddenError):
                self.guard.delete_chirp(self.access_header(1), 1)
        self.assertEqual([c.author_id for c in self.db.list_chirps()], [2])

    def test_delete_requires_token(self) -> None:
        self.db.create_chirp("hi", author_id=1)
        with self.assertRaises(UnauthorizedError):
            self.guard.delete_chirp("Bearer not-a-token", 1)
        self.assertEqual(self.db.get_chirp(1).body, "hi")


class TestLogin(GuardTestCase):
    def test_login_issues_both_tokens(self) -> None:
        self.db.create_user("a@x.com", "pw1")
        result = self.guard.login("a@x.com", "pw1")
        self.assertEqual(result.user.id, 1)
        self.assertEqual(self.tokens.validate_access(result.access_token).user_id, 1)
        self.assertEqual(self.tokens.validate_refresh(result.refresh_token).user_id, 1)

    def test_wrong_password_and_unknown_email_look_the_same(self) -> None:
        self.db.create_user("a@x.com", "pw1")
        with self.assertRaises(UnauthorizedError) as bad_pw:
            self.guard.login("a@x.com", "nope")
        with self.assertRaises(UnauthorizedError) as bad_email:
            self.guard.login("b@x.com", "pw1")
        self.assertEqual(bad_pw.exception.message, bad_email.exception.message)

    def test_update_user_applies_to_token_subject(self) -> None:
        self.db.create_user("a@x.com", "pw1")
        self.db.create_user("b@x.com", "pw2")
        updated = self.guard.update_user(self.access_header(2), "c@x.com", "pw3")
        self.assertEqual(updated.id, 2)
        self.assertEqual(self.guard.login("c@x.com", "pw3").user.id, 2)
        self.assertEqual(self.db.get_user(1).email, "a@x.com")


class TestRefreshAndRevoke(GuardTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.db.create_user("a@x.com", "pw1")
        self.refresh_token = self.guard.login("a@x.com", "pw1").refresh_token

    def test_refresh_issues_access_token_only(self) -> None:
        new_access = self.guard.refresh(_bearer(self.refresh_token))
        self.assertEqual(self.tokens.validate_access(new_access).user_id, 1)
        # Refresh token keeps working (no rotation).
        self.guard.refresh(_bearer(self.refresh_token))

    def test_refresh_rejects_access_token(self) -> None:
        with self.assertRaises(WrongRoleError):
            self.guard.refresh(self.access_header(1))

    def test_revoke_then_refresh_fails(self) -> None:
        self.guard.revoke(_bearer(self.refresh_token))
        with self.assertRaises(UnauthorizedError):
            self.guard.refresh(_bearer(self.refresh_token))
        self.guard.revoke(_bearer(self.refresh_token))

    def test_revoking_one_session_keeps_the_other(self) -> None:
        other = self.guard.login("a@x.com", "pw1").refresh_token
        self.assertNotEqual(other, self.refresh_token)
        self.guard.revoke(_bearer(self.refresh_token))
        self.assertEqual(self.tokens.validate_access(self.guard.refresh(_bearer(other))).user_id, 1)

    def test_revocation_survives_reload(self) -> None:
        self.guard.revoke(_bearer(self.refresh_token))
        self.db.close()
        self.db = ChirpyDB.open(self.path, bcrypt_rounds=4)
        guard = AuthGuard(self.db, self.tokens, POLKA_KEY)
        with self.assertRaises(UnauthorizedError):
            guard.refresh(_bearer(self.refresh_token))

    def test_revoke_rejects_access_token(self) -> None:
        with self.assertRaises(WrongRoleError):
            self.guard.revoke(self.access_header(1))

    def test_expired_refresh_token(self) -> None:
        old = TokenService(SECRET, now=lambda: datetime.now(UTC) - timedelta(hours=1441))
        expired = old.issue_refresh_token(1)
        with self.assertRaises(TokenExpiredError):
            self.guard.refresh(_bearer(expired))
        with self.assertRaises(TokenExpiredError):
            self.guard.revoke(_bearer(expired))


class TestPolka(GuardTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.db.create_user("a@x.com", "pw1")

    def test_upgrade(self) -> None:
        self.assertTrue(self.guard.handle_polka_event(f"ApiKey {POLKA_KEY}", "user.upgraded", 1))
        self.assertTrue(self.db.get_user(1).is_chirpy_red)

    def test_other_event_is_ignored(self) -> None:
        self.assertFalse(self.guard.handle_polka_event(f"ApiKey {POLKA_KEY}", "user.payment_failed", 1))
        self.assertFalse(self.db.get_user(1).is_chirpy_red)

    def test_other_event_for_unknown_user_is_ignored(self) -> None:
        self.assertFalse(self.guard.handle_polka_event(f"ApiKey {POLKA_KEY}", "user.deleted", 42))

    def test_unknown_user(self) -> None:
        with self.assertRaises(NotFoundError):
            self.guard.handle_polka_event(f"ApiKey {POLKA_KEY}", "user.upgraded", 42)

    def test_bad_key(self) -> None:
        for header in (None, "ApiKey wrong", f"Bearer {POLKA_KEY}"):
            with self.subTest(header=header):
                with self.assertRaises(UnauthorizedError):
                    self.guard.handle_polka_event(header, "user.upgraded", 1)
        self.assertFalse(self.db.get_user(1).is_chirpy_red)

    def test_empty_configured_key_rejects_everything(self) -> None:
        guard = AuthGuard(self.db, self.tokens, "")
        with self.assertRaises(UnauthorizedError):
            guard.handle_polka_event("ApiKey x", "user.upgraded", 1)


if __name__ == "__main__":
    unittest.main()
