"""Read-time aggregates (cached) and the two manually maintained metric tables."""

from fastapi import APIRouter

from tracker.api.deps import Audit, Cache, DbSession, SuperAdmin
from tracker.schemas.common import MessageResponse
from tracker.schemas.metrics import (
    CompletionRatesResponse,
    CompletionRateUpdate,
    DashboardMetrics,
    ImpactMetricsResponse,
    MetricUpdate,
)
from tracker.schemas.projects import CommunitySummary
from tracker.services import metrics, projects

router = APIRouter()


@router.get("/metrics", response_model=DashboardMetrics)
def get_metrics(db: DbSession, cache: Cache) -> DashboardMetrics:
    """Project counts plus impact metrics; Scholarships and Total Investment are computed."""
    return cache.get_or_compute("metrics", None, lambda: metrics.dashboard_metrics(db))


@router.put("/metrics", response_model=MessageResponse)
def put_metric(
    body: MetricUpdate,
    _admin: SuperAdmin,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> MessageResponse:
    """Set a metric value by label, creating it (sector 'general' by default) if new."""
    created = metrics.upsert_metric(db, body.label, body.value, body.sector)
    cache.clear()
    audit(
        "CREATE_METRIC" if created else "UPDATE_METRIC",
        {"label": body.label, "value": body.value},
    )
    return MessageResponse(message="Metric created" if created else "Metric updated")


@router.get("/impact-metrics", response_model=ImpactMetricsResponse)
def get_impact_metrics(db: DbSession, cache: Cache, sector: str | None = None) -> ImpactMetricsResponse:
    """Stored metrics for a sector (or all) plus the formatted Sector Investment total."""
    return cache.get_or_compute(
        "impact-metrics",
        {"sector": sector},
        lambda: metrics.impact_metrics(db, sector),
    )


@router.get("/communities", response_model=list[CommunitySummary])
def get_communities(db: DbSession, cache: Cache) -> list[CommunitySummary]:
    """Completed and ongoing project counts per community."""
    return cache.get_or_compute("communities", None, lambda: projects.community_summary(db))


@router.get("/completion-rates", response_model=CompletionRatesResponse)
def get_completion_rates(
    db: DbSession,
    cache: Cache,
    sector: str | None = None,
) -> CompletionRatesResponse:
    return cache.get_or_compute(
        "rates",
        {"sector": sector},
        lambda: metrics.completion_rates(db, sector),
    )


@router.put("/completion-rates", response_model=MessageResponse)
def put_completion_rate(
    body: CompletionRateUpdate,
    _admin: SuperAdmin,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> MessageResponse:
    """Manual override of a sector's completion percentage (0-100)."""
    created = metrics.set_completion_rate(db, body.sector, body.rate)
    cache.clear()
    audit("UPDATE_COMPLETION_RATE", {"sector": body.sector, "rate": body.rate})
    return MessageResponse(message="Completion rate created" if created else "Completion rate updated")
