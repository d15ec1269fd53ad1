"""ORM model for constituency development projects."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from tracker.models.base import Base


class Project(Base):
    """
    One development project. status='archived' is the soft-deleted state:
    the row stays, but default listings and aggregates leave it out.
    """

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    locations = Column(String(1024), nullable=False, default="")
    sector = Column(String(64), nullable=False, index=True)
    year = Column(Integer, nullable=True, index=True)
    status = Column(String(32), nullable=False, default="planned", index=True)
    category = Column(String(32), nullable=False, default="infra")
    community = Column(String(255), nullable=False, default="", index=True)
    image_url = Column(String(1024), nullable=True)
    # Free text as entered; aggregation parses it.
    project_cost = Column(String(64), nullable=True)
    funding_source = Column(String(255), nullable=True)
    beneficiary_count = Column(Integer, nullable=True)
    contractor = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
