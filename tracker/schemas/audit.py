"""Schemas for reading the audit trail."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class AuditLogOut(BaseModel):
    id: int
    user_id: int | None = None
    username: str | None = None
    action: str
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class AuditLogListResponse(BaseModel):
    logs: list[AuditLogOut]
