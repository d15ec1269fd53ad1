"""Request/response schemas for project endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from tracker.services.normalize import (
    clean_cost,
    clean_text,
    coerce_int,
    derive_community,
    normalize_category,
    normalize_tag,
)


class _ProjectFields(BaseModel):
    """Shared normalization for project input, whether from a form, JSON or a spreadsheet row."""

    name: str | None = Field(default=None, max_length=255)
    locations: str | None = Field(default=None, max_length=1024)
    sector: str | None = Field(default=None, max_length=64)
    year: int | None = Field(default=None, ge=1900, le=2200)
    status: str | None = Field(default=None, max_length=32)
    category: str | None = Field(default=None, max_length=32)
    community: str | None = Field(default=None, max_length=255)
    project_cost: str | None = Field(default=None, max_length=64)
    funding_source: str | None = Field(default=None, max_length=255)
    beneficiary_count: int | None = Field(default=None, ge=0)
    contractor: str | None = Field(default=None, max_length=255)
    description: str | None = None

    @field_validator(
        "name",
        "locations",
        "community",
        "funding_source",
        "contractor",
        "description",
        mode="before",
    )
    @classmethod
    def _strip(cls, v: object) -> str | None:
        return clean_text(v)

    @field_validator("sector", "status", mode="before")
    @classmethod
    def _lower(cls, v: object) -> str | None:
        return normalize_tag(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: object) -> str | None:
        return normalize_category(v, default=None)

    @field_validator("project_cost", mode="before")
    @classmethod
    def _cost(cls, v: object) -> str | None:
        return clean_cost(v)

    @field_validator("year", "beneficiary_count", mode="before")
    @classmethod
    def _integer(cls, v: object) -> int | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        parsed = coerce_int(v)
        if parsed is None:
            raise ValueError("must be a whole number")
        return parsed


# Every field a project form or JSON body may carry.
PROJECT_FIELDS = frozenset(_ProjectFields.model_fields)


class ProjectInput(_ProjectFields):
    """A new project. name and sector are required; status/category get defaults."""

    name: str = Field(..., min_length=1, max_length=255)
    sector: str = Field(..., min_length=1, max_length=64)
    locations: str = Field(default="", max_length=1024)
    status: str = Field(default="planned", max_length=32)
    category: str = Field(default="infra", max_length=32)

    @field_validator("locations", mode="before")
    @classmethod
    def _locations(cls, v: object) -> str:
        return clean_text(v) or ""

    @field_validator("status", mode="before")
    @classmethod
    def _status_default(cls, v: object) -> str:
        return normalize_tag(v, "planned")

    @field_validator("category", mode="before")
    @classmethod
    def _category_default(cls, v: object) -> str:
        return normalize_category(v)

    @model_validator(mode="after")
    def _fill_community(self) -> "ProjectInput":
        if not self.community:
            self.community = derive_community(self.locations)
        return self


class ProjectUpdate(_ProjectFields):
    """Partial update: only fields that are set are written."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    sector: str | None = Field(default=None, min_length=1, max_length=64)


class ProjectFilters(BaseModel):
    """Query parameters for GET /projects."""

    sector: str | None = None
    year_start: int | None = None
    year_end: int | None = None
    search: str | None = Field(default=None, max_length=255)
    status: str | None = None
    funding: str | None = Field(default=None, max_length=255)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class ProjectOut(BaseModel):
    id: int
    name: str
    locations: str
    sector: str
    year: int | None = None
    status: str
    category: str
    community: str
    image_url: str | None = None
    project_cost: str | None = None
    funding_source: str | None = None
    beneficiary_count: int | None = None
    contractor: str | None = None
    description: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class ProjectListResponse(BaseModel):
    projects: list[ProjectOut]
    pagination: Pagination


class ProjectCreatedResponse(BaseModel):
    id: int
    message: str = "Project created"
    image_url: str | None = None


class CommunitySummary(BaseModel):
    name: str
    completed: int
    ongoing: int
