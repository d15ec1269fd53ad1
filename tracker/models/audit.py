"""ORM model for the append-only audit trail."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB

from tracker.models.base import Base


class AuditLogEntry(Base):
    """Who did what, from where. Rows are only ever inserted."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True, index=True)
    username = Column(String(255), nullable=True)
    action = Column(String(64), nullable=False, index=True)
    details = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    ip_address = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
