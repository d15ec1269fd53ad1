"""ORM models for sector impact metrics and completion rates."""

from sqlalchemy import Column, Integer, String

from tracker.models.base import Base


class ImpactMetric(Base):
    """Freeform (sector, label, value) triple shown on sector dashboards."""

    __tablename__ = "impact_metrics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sector = Column(String(64), nullable=False, default="general", index=True)
    label = Column(String(255), nullable=False, index=True)
    val = Column(String(255), nullable=False)


class CompletionRate(Base):
    """Manually maintained completion percentage for one sector."""

    __tablename__ = "completion_rates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sector = Column(String(64), nullable=False, unique=True, index=True)
    rate = Column(Integer, nullable=False, default=0)
