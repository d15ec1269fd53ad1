"""The audit writer must never raise into the request that called it."""

import unittest
from unittest.mock import MagicMock

from tests.support import make_session_factory
from tracker.models import AuditLogEntry
from tracker.services.audit import ANONYMOUS, AuditActor, AuditLogger, list_entries


class TestAuditLogger(unittest.TestCase):
    def test_records_entry(self) -> None:
        Session = make_session_factory()
        audit = AuditLogger(Session)
        self.assertTrue(
            audit.record("CREATE_PROJECT", {"id": 7}, actor=AuditActor(3, "kofi"), source="10.0.0.1")
        )
        with Session() as db:
            entry = db.query(AuditLogEntry).one()
            self.assertEqual(entry.user_id, 3)
            self.assertEqual(entry.username, "kofi")
            self.assertEqual(entry.details, {"id": 7})
            self.assertEqual(entry.ip_address, "10.0.0.1")

    def test_defaults_to_anonymous_unknown_source(self) -> None:
        Session = make_session_factory()
        AuditLogger(Session).record("SERVER_ERROR")
        with Session() as db:
            entry = db.query(AuditLogEntry).one()
            self.assertEqual(entry.username, ANONYMOUS.username)
            self.assertIsNone(entry.user_id)
            self.assertEqual(entry.ip_address, "unknown")

    def test_failed_write_returns_false(self) -> None:
        session = MagicMock()
        session.commit.side_effect = RuntimeError("connection lost")
        audit = AuditLogger(lambda: session)
        self.assertFalse(audit.record("DELETE_PROJECT", {"id": 1}))
        session.rollback.assert_called_once()
        session.close.assert_called_once()

    def test_unavailable_session_returns_false(self) -> None:
        def broken_factory():
            raise RuntimeError("pool exhausted")

        self.assertFalse(AuditLogger(broken_factory).record("LOGIN_FAIL"))


class TestListEntries(unittest.TestCase):
    def test_newest_first_with_action_filter(self) -> None:
        Session = make_session_factory()
        audit = AuditLogger(Session)
        audit.record("LOGIN_FAIL")
        audit.record("BULK_UPLOAD", {"inserted": 2})
        audit.record("LOGIN_FAIL")
        with Session() as db:
            self.assertEqual(
                [e.action for e in list_entries(db)],
                ["LOGIN_FAIL", "BULK_UPLOAD", "LOGIN_FAIL"],
            )
            self.assertEqual(len(list_entries(db, "login_fail")), 2)
            self.assertEqual(len(list_entries(db, limit=1)), 1)
