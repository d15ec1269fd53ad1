"""Dashboard aggregates, impact metrics and completion rates."""

from sqlalchemy.orm import Session

from tracker.core.errors import ValidationError
from tracker.models import CompletionRate, ImpactMetric
from tracker.schemas.metrics import (
    CompletionRateOut,
    CompletionRatesResponse,
    DashboardMetrics,
    ImpactMetricOut,
    ImpactMetricsResponse,
    ProjectCounts,
)
from tracker.services.normalize import format_investment
from tracker.services.projects import count_sector, status_counts, total_project_investment
from tracker.services.scholarships import scholarship_totals

SCHOLARSHIPS_LABEL = "Scholarships"
TOTAL_INVESTMENT_LABEL = "Total Investment"
SECTOR_INVESTMENT_LABEL = "Sector Investment"
DEFAULT_METRIC_SECTOR = "general"


def dashboard_metrics(db: Session) -> DashboardMetrics:
    """
    Headline numbers for the dashboard.

    Stored impact metrics are keyed by label; 'Scholarships' and
    'Total Investment' are always recomputed from project and scholarship rows
    and override any stored metric with the same label.
    """
    metrics: dict[str, str | float] = {
        m.label: m.val for m in db.query(ImpactMetric).order_by(ImpactMetric.id)
    }
    scholarship_count, scholarship_amount = scholarship_totals(db)
    metrics[SCHOLARSHIPS_LABEL] = str(scholarship_count + count_sector(db, "scholarship"))
    metrics[TOTAL_INVESTMENT_LABEL] = float(total_project_investment(db) + scholarship_amount)
    return DashboardMetrics(counts=ProjectCounts(**status_counts(db)), metrics=metrics)


def impact_metrics(db: Session, sector: str | None = None) -> ImpactMetricsResponse:
    """Stored metrics (optionally for one sector) plus a formatted 'Sector Investment' entry."""
    query = db.query(ImpactMetric)
    if sector:
        query = query.filter(ImpactMetric.sector == sector)
    rows = [ImpactMetricOut.model_validate(m) for m in query.order_by(ImpactMetric.id)]
    rows.append(
        ImpactMetricOut(
            sector=sector,
            label=SECTOR_INVESTMENT_LABEL,
            val=format_investment(total_project_investment(db, sector)),
        )
    )
    return ImpactMetricsResponse(metrics=rows)


def upsert_metric(
    db: Session,
    label: str | None,
    value: str | None,
    sector: str | None = None,
) -> bool:
    """Set the value for a label, creating the metric if needed. Returns True if created."""
    if not label or not value:
        raise ValidationError("Label and value required")
    metric = db.query(ImpactMetric).filter(ImpactMetric.label == label).first()
    created = metric is None
    if created:
        db.add(ImpactMetric(sector=sector or DEFAULT_METRIC_SECTOR, label=label, val=value))
    else:
        metric.val = value
        if sector:
            metric.sector = sector
    db.commit()
    return created


def completion_rates(db: Session, sector: str | None = None) -> CompletionRatesResponse:
    query = db.query(CompletionRate)
    if sector:
        query = query.filter(CompletionRate.sector == sector)
    return CompletionRatesResponse(
        rates=[CompletionRateOut.model_validate(r) for r in query.order_by(CompletionRate.sector)]
    )


def set_completion_rate(db: Session, sector: str, rate: int) -> bool:
    """Manual override of a sector's completion percentage. Returns True if created."""
    row = db.query(CompletionRate).filter(CompletionRate.sector == sector).first()
    created = row is None
    if created:
        db.add(CompletionRate(sector=sector, rate=rate))
    else:
        row.rate = rate
    db.commit()
    return created
