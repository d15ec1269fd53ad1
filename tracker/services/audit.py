"""Best-effort audit trail writer. Never raises into the calling request."""

import logging
from collections.abc import Callable
from typing import Any, NamedTuple

from sqlalchemy.orm import Session

from tracker.models import AuditLogEntry

logger = logging.getLogger(__name__)


class AuditActor(NamedTuple):
    """Who an audit entry is attributed to. id is None for anonymous or failed logins."""

    id: int | None
    username: str


ANONYMOUS = AuditActor(id=None, username="anonymous")


class AuditLogger:
    """
    Append-only audit side channel.

    Writes through its own session so a failed or rolled-back request session
    cannot take the audit entry down with it (and vice versa). Call record()
    after the primary transaction has committed.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def record(
        self,
        action: str,
        details: dict[str, Any] | None = None,
        *,
        actor: AuditActor | None = None,
        source: str | None = None,
    ) -> bool:
        """Insert one audit row. Returns False (and logs) if the write failed."""
        who = actor or ANONYMOUS
        try:
            db = self._session_factory()
        except Exception:
            logger.exception("Audit log error: could not open session for action=%s", action)
            return False
        try:
            db.add(
                AuditLogEntry(
                    user_id=who.id,
                    username=who.username,
                    action=action,
                    details=details or {},
                    ip_address=source or "unknown",
                )
            )
            db.commit()
            return True
        except Exception:
            db.rollback()
            logger.exception("Audit log error: action=%s user=%s", action, who.username)
            return False
        finally:
            db.close()


def list_entries(
    db: Session,
    action: str | None = None,
    limit: int = 100,
) -> list[AuditLogEntry]:
    """Most recent audit entries first, optionally filtered by action tag."""
    query = db.query(AuditLogEntry)
    if action:
        query = query.filter(AuditLogEntry.action == action.upper())
    return query.order_by(AuditLogEntry.id.desc()).limit(limit).all()
