"""Schemas for dashboard metrics, impact metrics and completion rates."""

from pydantic import BaseModel, Field, field_validator


class ProjectCounts(BaseModel):
    total: int
    completed: int
    ongoing: int


class DashboardMetrics(BaseModel):
    """Headline counts plus label -> value metrics (Scholarships and Total Investment computed)."""

    counts: ProjectCounts
    metrics: dict[str, str | float]


class MetricUpdate(BaseModel):
    label: str | None = Field(default=None, max_length=255)
    value: str | None = Field(default=None, max_length=255)
    sector: str | None = Field(default=None, max_length=64)

    @field_validator("label", "value", "sector", mode="before")
    @classmethod
    def _strip(cls, v: object) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class ImpactMetricOut(BaseModel):
    id: int | None = None
    sector: str | None = None
    label: str
    val: str

    class Config:
        from_attributes = True


class ImpactMetricsResponse(BaseModel):
    metrics: list[ImpactMetricOut]


class CompletionRateOut(BaseModel):
    id: int
    sector: str
    rate: int

    class Config:
        from_attributes = True


class CompletionRatesResponse(BaseModel):
    rates: list[CompletionRateOut]


class CompletionRateUpdate(BaseModel):
    sector: str = Field(..., min_length=1, max_length=64)
    rate: int = Field(..., ge=0, le=100)

    @field_validator("sector", mode="before")
    @classmethod
    def _lower(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v
