"""ORM model for scholarship awards."""

from sqlalchemy import Column, DateTime, Integer, Numeric, String, func

from tracker.models.base import Base


class Scholarship(Base):
    __tablename__ = "scholarships"

    id = Column(Integer, primary_key=True, autoincrement=True)
    beneficiary_name = Column(String(255), nullable=False)
    institution = Column(String(255), nullable=False)
    amount = Column(Numeric(15, 2), nullable=True)
    year = Column(Integer, nullable=True, index=True)
    status = Column(String(32), nullable=False, default="Pending")
    category = Column(String(64), nullable=False, default="Tertiary")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
