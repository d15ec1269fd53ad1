"""SQLAlchemy ORM models."""

from tracker.models.audit import AuditLogEntry
from tracker.models.base import Base
from tracker.models.metric import CompletionRate, ImpactMetric
from tracker.models.project import Project
from tracker.models.scholarship import Scholarship
from tracker.models.user import User

__all__ = [
    "AuditLogEntry",
    "Base",
    "CompletionRate",
    "ImpactMetric",
    "Project",
    "Scholarship",
    "User",
]
