"""Helpers for API tests: a fresh in-memory database and app per test case."""

import unittest
from io import BytesIO

from fastapi.testclient import TestClient
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tracker.core.security import create_access_token, hash_password
from tracker.main import create_app
from tracker.models import AuditLogEntry, Base, User

PASSWORD = "Passw0rd!"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def make_session_factory() -> sessionmaker:
    """One shared in-memory connection so every session sees the same tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)


def add_user(
    Session: sessionmaker,
    username: str,
    role: str,
    status: str = "approved",
    password: str = PASSWORD,
) -> int:
    with Session() as db:
        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            status=status,
        )
        db.add(user)
        db.commit()
        return user.id


def bearer(Session: sessionmaker, role: str, username: str | None = None) -> dict[str, str]:
    """Authorization header for a new approved user holding role."""
    name = username or role
    token = create_access_token(add_user(Session, name, role), name, role)
    return {"Authorization": f"Bearer {token}"}


def workbook_bytes(rows: list[list[object]]) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class ApiTestCase(unittest.TestCase):
    """Builds the app against a private database; helpers create users and tokens."""

    def setUp(self) -> None:
        self.Session = make_session_factory()
        self.app = create_app(session_factory=self.Session)
        self.client = TestClient(self.app)

    def add_user(
        self,
        username: str,
        role: str,
        status: str = "approved",
        password: str = PASSWORD,
    ) -> int:
        return add_user(self.Session, username, role, status, password)

    def auth(self, role: str, username: str | None = None) -> dict[str, str]:
        return bearer(self.Session, role, username)

    def audit_actions(self) -> list[str]:
        with self.Session() as db:
            return [e.action for e in db.query(AuditLogEntry).order_by(AuditLogEntry.id)]

    def create_project(self, headers: dict[str, str], **fields: object) -> int:
        body = {"name": "Borehole", "sector": "water", "locations": "Kpalsi, Tamale"}
        body.update(fields)
        resp = self.client.post("/api/projects", json=body, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["id"]
