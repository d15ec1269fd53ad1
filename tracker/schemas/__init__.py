"""Pydantic request/response schemas."""

from tracker.schemas.audit import AuditLogListResponse, AuditLogOut
from tracker.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserCreateRequest,
    UserListItem,
    UsersListResponse,
    UserStatusRequest,
    UserUpdateRequest,
)
from tracker.schemas.common import MessageResponse
from tracker.schemas.health import HealthResponse
from tracker.schemas.metrics import (
    CompletionRatesResponse,
    CompletionRateUpdate,
    DashboardMetrics,
    ImpactMetricsResponse,
    MetricUpdate,
)
from tracker.schemas.projects import (
    CommunitySummary,
    ProjectCreatedResponse,
    ProjectFilters,
    ProjectInput,
    ProjectListResponse,
    ProjectOut,
    ProjectUpdate,
)
from tracker.schemas.scholarships import (
    ScholarshipCreatedResponse,
    ScholarshipInput,
    ScholarshipListResponse,
    ScholarshipOut,
    ScholarshipUpdate,
)
from tracker.schemas.upload import BulkUploadResponse

__all__ = [
    "AuditLogListResponse",
    "AuditLogOut",
    "BulkUploadResponse",
    "CommunitySummary",
    "CompletionRateUpdate",
    "CompletionRatesResponse",
    "CurrentUser",
    "DashboardMetrics",
    "HealthResponse",
    "ImpactMetricsResponse",
    "LoginRequest",
    "MessageResponse",
    "MetricUpdate",
    "ProjectCreatedResponse",
    "ProjectFilters",
    "ProjectInput",
    "ProjectListResponse",
    "ProjectOut",
    "ProjectUpdate",
    "RegisterRequest",
    "ScholarshipCreatedResponse",
    "ScholarshipInput",
    "ScholarshipListResponse",
    "ScholarshipOut",
    "ScholarshipUpdate",
    "TokenResponse",
    "UserCreateRequest",
    "UserListItem",
    "UserStatusRequest",
    "UserUpdateRequest",
    "UsersListResponse",
]
