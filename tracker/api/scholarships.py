"""Scholarship endpoints."""

from fastapi import APIRouter

from tracker.api.deps import Audit, Cache, DbSession, Deleter, Editor
from tracker.schemas.common import MessageResponse
from tracker.schemas.scholarships import (
    ScholarshipCreatedResponse,
    ScholarshipInput,
    ScholarshipListResponse,
    ScholarshipOut,
    ScholarshipUpdate,
)
from tracker.services import scholarships

router = APIRouter()


@router.get("", response_model=ScholarshipListResponse)
def list_scholarships(db: DbSession, year: int | None = None) -> ScholarshipListResponse:
    """All scholarships, newest first, optionally for one year."""
    rows = scholarships.list_scholarships(db, year)
    return ScholarshipListResponse(scholarships=[ScholarshipOut.model_validate(s) for s in rows])


@router.post("", response_model=ScholarshipCreatedResponse, status_code=201)
def create_scholarship(
    body: ScholarshipInput,
    _user: Editor,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> ScholarshipCreatedResponse:
    scholarship = scholarships.create_scholarship(db, body)
    cache.clear()
    audit(
        "CREATE_SCHOLARSHIP",
        {"id": scholarship.id, "beneficiary_name": scholarship.beneficiary_name},
    )
    return ScholarshipCreatedResponse(id=scholarship.id)


@router.put("/{scholarship_id}", response_model=MessageResponse)
def update_scholarship(
    scholarship_id: int,
    body: ScholarshipUpdate,
    _user: Editor,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> MessageResponse:
    scholarships.update_scholarship(db, scholarship_id, body)
    cache.clear()
    audit("UPDATE_SCHOLARSHIP", {"id": scholarship_id})
    return MessageResponse(message="Scholarship updated")


@router.delete("/{scholarship_id}", response_model=MessageResponse)
def delete_scholarship(
    scholarship_id: int,
    _user: Deleter,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> MessageResponse:
    scholarships.delete_scholarship(db, scholarship_id)
    cache.clear()
    audit("DELETE_SCHOLARSHIP", {"id": scholarship_id})
    return MessageResponse(message="Scholarship deleted")
