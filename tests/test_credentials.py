"""Tests for registration, password policy and the login decision order."""

import unittest

from tests.support import PASSWORD, make_session_factory
from tracker.core.errors import AccessDenied, DuplicateUser, InvalidCredentials, ValidationError
from tracker.core.security import decode_access_token, password_meets_policy
from tracker.models import AuditLogEntry, User
from tracker.services.audit import AuditLogger
from tracker.services.credentials import authenticate, register
from tracker.services.users import set_status


class TestPasswordPolicy(unittest.TestCase):
    def test_accepts(self) -> None:
        self.assertTrue(password_meets_policy("abcdefg1"))
        self.assertTrue(password_meets_policy("abc!defg"))
        self.assertTrue(password_meets_policy(PASSWORD))

    def test_rejects(self) -> None:
        self.assertFalse(password_meets_policy("password"))
        self.assertFalse(password_meets_policy("12345678"))
        self.assertFalse(password_meets_policy("abc1"))
        self.assertFalse(password_meets_policy("pass word1"))
        self.assertFalse(password_meets_policy(None))


class CredentialsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.Session = make_session_factory()
        self.db = self.Session()
        self.audit = AuditLogger(self.Session)

    def tearDown(self) -> None:
        self.db.close()

    def actions(self) -> list[tuple[str, str]]:
        with self.Session() as db:
            return [
                (e.action, e.username)
                for e in db.query(AuditLogEntry).order_by(AuditLogEntry.id)
            ]


class TestRegister(CredentialsTestCase):
    def test_new_account_is_pending_viewer(self) -> None:
        user = register(self.db, "ama", PASSWORD)
        self.assertEqual(user.role, "public_viewer")
        self.assertEqual(user.status, "pending")
        self.assertNotEqual(user.password_hash, PASSWORD)

    def test_elevated_role_is_honoured(self) -> None:
        self.assertEqual(register(self.db, "kofi", PASSWORD, "editor").role, "editor")

    def test_unknown_role_falls_back_to_viewer(self) -> None:
        self.assertEqual(register(self.db, "yaw", PASSWORD, "root").role, "public_viewer")

    def test_username_registers_once(self) -> None:
        register(self.db, "ama", PASSWORD)
        with self.assertRaises(DuplicateUser):
            register(self.db, "ama", PASSWORD, "analyst")
        self.assertEqual(self.db.query(User).count(), 1)

    def test_weak_password_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            register(self.db, "ama", "password")
        with self.assertRaises(ValidationError):
            register(self.db, "  ", PASSWORD)


class TestAuthenticate(CredentialsTestCase):
    def test_unknown_user(self) -> None:
        with self.assertRaises(InvalidCredentials):
            authenticate(self.db, "ghost", PASSWORD, audit=self.audit)
        self.assertEqual(self.actions(), [("LOGIN_FAIL", "ghost")])

    def test_wrong_password_checked_before_role(self) -> None:
        register(self.db, "viewer", PASSWORD)
        with self.assertRaises(InvalidCredentials):
            authenticate(self.db, "viewer", "Wr0ngpass", audit=self.audit)

    def test_viewer_never_logs_in_even_when_approved(self) -> None:
        user = register(self.db, "viewer", PASSWORD)
        set_status(self.db, user.id, "approved")
        with self.assertRaises(AccessDenied) as ctx:
            authenticate(self.db, "viewer", PASSWORD, audit=self.audit)
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(self.actions(), [("LOGIN_BLOCK", "viewer")])

    def test_pending_and_blocked_are_denied(self) -> None:
        user = register(self.db, "kofi", PASSWORD, "editor")
        with self.assertRaises(AccessDenied):
            authenticate(self.db, "kofi", PASSWORD, audit=self.audit)
        set_status(self.db, user.id, "blocked")
        with self.assertRaises(AccessDenied):
            authenticate(self.db, "kofi", PASSWORD, audit=self.audit)

    def test_approved_user_gets_token(self) -> None:
        user = register(self.db, "kofi", PASSWORD, "editor")
        set_status(self.db, user.id, "approved")
        result = authenticate(self.db, " kofi ", PASSWORD, audit=self.audit, source="10.0.0.9")
        self.assertEqual(result.role, "editor")
        payload = decode_access_token(result.token)
        self.assertEqual(payload["sub"], str(user.id))
        self.assertEqual(payload["role"], "editor")
        self.assertEqual(self.actions(), [("LOGIN_SUCCESS", "kofi")])
