"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from tracker.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: super_admin, regional_admin, analyst, editor or public_viewer
    status: pending (self-registered), approved, or blocked
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="public_viewer")
    status = Column(String(16), nullable=False, default="pending")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
