"""Read-only view of the audit trail (super admin only)."""

from typing import Annotated

from fastapi import APIRouter, Query

from tracker.api.deps import DbSession, SuperAdmin
from tracker.schemas.audit import AuditLogListResponse, AuditLogOut
from tracker.services.audit import list_entries

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
def list_audit_logs(
    _admin: SuperAdmin,
    db: DbSession,
    action: str | None = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> AuditLogListResponse:
    """Most recent entries first; filter by action tag (e.g. BULK_UPLOAD)."""
    return AuditLogListResponse(
        logs=[AuditLogOut.model_validate(e) for e in list_entries(db, action, limit)]
    )
