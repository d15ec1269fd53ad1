"""Scholarship repository."""

from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from tracker.core.errors import NotFound, ValidationError
from tracker.models import Scholarship
from tracker.schemas.scholarships import ScholarshipInput, ScholarshipUpdate

_REQUIRED_FIELDS = ("beneficiary_name", "institution")


def list_scholarships(db: Session, year: int | None = None) -> list[Scholarship]:
    query = db.query(Scholarship)
    if year is not None:
        query = query.filter(Scholarship.year == year)
    return query.order_by(Scholarship.created_at.desc(), Scholarship.id.desc()).all()


def _get(db: Session, scholarship_id: int) -> Scholarship:
    scholarship = db.get(Scholarship, scholarship_id)
    if scholarship is None:
        raise NotFound("Scholarship not found")
    return scholarship


def create_scholarship(db: Session, data: ScholarshipInput) -> Scholarship:
    if not data.beneficiary_name or not data.institution:
        raise ValidationError("Name and Institution required")
    scholarship = Scholarship(**data.model_dump())
    db.add(scholarship)
    db.commit()
    db.refresh(scholarship)
    return scholarship


def update_scholarship(db: Session, scholarship_id: int, changes: ScholarshipUpdate) -> None:
    scholarship = _get(db, scholarship_id)
    values = changes.model_dump(exclude_unset=True)
    for field in _REQUIRED_FIELDS:
        if field in values and not values[field]:
            raise ValidationError("Name and Institution cannot be empty")
    for field in ("status", "category"):
        if field in values and values[field] is None:
            del values[field]
    for field, value in values.items():
        setattr(scholarship, field, value)
    db.commit()


def delete_scholarship(db: Session, scholarship_id: int) -> None:
    db.delete(_get(db, scholarship_id))
    db.commit()


def scholarship_totals(db: Session) -> tuple[int, Decimal]:
    """(number of scholarships, sum of amounts)."""
    count, amount = db.query(func.count(Scholarship.id), func.sum(Scholarship.amount)).one()
    return int(count or 0), Decimal(str(amount)) if amount is not None else Decimal("0")
