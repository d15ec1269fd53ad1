"""Project repository: filtered listing, CRUD with soft delete, read-time aggregates."""

import logging
import math
from decimal import Decimal

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from tracker.core.errors import NotFound, ValidationError
from tracker.models import Project
from tracker.schemas.projects import (
    CommunitySummary,
    Pagination,
    ProjectFilters,
    ProjectInput,
    ProjectListResponse,
    ProjectOut,
    ProjectUpdate,
)
from tracker.services.normalize import ARCHIVED, derive_community, parse_amount

logger = logging.getLogger(__name__)

# Columns a project update may never set to NULL.
_NON_NULL_FIELDS = frozenset({"locations", "status", "category", "community"})


def _is_all(value: str | None) -> bool:
    return not value or value.strip().lower() == "all"


def _filtered_query(db: Session, filters: ProjectFilters):
    query = db.query(Project)

    status = None if _is_all(filters.status) else filters.status.strip().lower()
    if status == ARCHIVED:
        query = query.filter(Project.status == ARCHIVED)
    else:
        query = query.filter(Project.status != ARCHIVED)
        if status:
            query = query.filter(Project.status == status)

    if not _is_all(filters.sector):
        query = query.filter(Project.sector == filters.sector.strip().lower())
    if filters.year_start is not None:
        query = query.filter(Project.year >= filters.year_start)
    if filters.year_end is not None:
        query = query.filter(Project.year <= filters.year_end)
    if filters.search and filters.search.strip():
        term = f"%{filters.search.strip()}%"
        query = query.filter(
            or_(
                Project.name.ilike(term),
                Project.locations.ilike(term),
                Project.contractor.ilike(term),
                Project.description.ilike(term),
            )
        )
    if not _is_all(filters.funding):
        query = query.filter(Project.funding_source.ilike(f"%{filters.funding.strip()}%"))
    return query


def list_projects(db: Session, filters: ProjectFilters) -> ProjectListResponse:
    """
    Page of projects matching every given filter (AND), newest first.

    Archived projects are left out unless status=archived is asked for explicitly.
    """
    query = _filtered_query(db, filters)
    total = query.count()
    offset = (filters.page - 1) * filters.limit
    rows = query.order_by(Project.id.desc()).offset(offset).limit(filters.limit).all()
    return ProjectListResponse(
        projects=[ProjectOut.model_validate(p) for p in rows],
        pagination=Pagination(
            total=total,
            page=filters.page,
            limit=filters.limit,
            totalPages=math.ceil(total / filters.limit),
        ),
    )


def get_project(db: Session, project_id: int) -> Project:
    """Direct lookup by id. Archived projects are returned too."""
    project = db.get(Project, project_id)
    if project is None:
        raise NotFound("Project not found")
    return project


def build_project(data: ProjectInput, image_url: str | None = None) -> Project:
    return Project(image_url=image_url, **data.model_dump())


def create_project(db: Session, data: ProjectInput, image_url: str | None = None) -> Project:
    project = build_project(data, image_url)
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Created project id=%s sector=%s", project.id, project.sector)
    return project


def check_update(changes: ProjectUpdate) -> None:
    """Reject an update that would blank the name or sector."""
    values = changes.model_dump(exclude_unset=True)
    if ("name" in values and not values["name"]) or ("sector" in values and not values["sector"]):
        raise ValidationError("Name and Sector cannot be empty")


def update_project(
    db: Session,
    project_id: int,
    changes: ProjectUpdate,
    image_url: str | None = None,
) -> dict[str, object]:
    """Apply the fields set on changes. Returns the values written."""
    check_update(changes)
    project = get_project(db, project_id)
    values = changes.model_dump(exclude_unset=True)
    for field in _NON_NULL_FIELDS:
        if field in values and values[field] is None:
            if field == "locations":
                values[field] = ""
            else:
                del values[field]
    if "locations" in values and "community" not in values:
        values["community"] = derive_community(values["locations"])
    if image_url:
        values["image_url"] = image_url
    for field, value in values.items():
        setattr(project, field, value)
    db.commit()
    return values


def archive_project(db: Session, project_id: int) -> None:
    """Soft delete: the row stays, with status 'archived'."""
    project = get_project(db, project_id)
    project.status = ARCHIVED
    db.commit()


def community_summary(db: Session) -> list[CommunitySummary]:
    """Completed/ongoing project counts per community (archived projects excluded)."""
    rows = (
        db.query(
            Project.community,
            func.sum(case((Project.status == "completed", 1), else_=0)),
            func.sum(case((Project.status == "ongoing", 1), else_=0)),
        )
        .filter(Project.status != ARCHIVED)
        .group_by(Project.community)
        .order_by(Project.community)
        .all()
    )
    return [
        CommunitySummary(name=community or "", completed=int(completed or 0), ongoing=int(ongoing or 0))
        for community, completed, ongoing in rows
    ]


def status_counts(db: Session) -> dict[str, int]:
    """total/completed/ongoing counts over non-archived projects."""
    total, completed, ongoing = (
        db.query(
            func.count(Project.id),
            func.sum(case((func.lower(Project.status) == "completed", 1), else_=0)),
            func.sum(case((func.lower(Project.status) == "ongoing", 1), else_=0)),
        )
        .filter(Project.status != ARCHIVED)
        .one()
    )
    return {"total": int(total or 0), "completed": int(completed or 0), "ongoing": int(ongoing or 0)}


def count_sector(db: Session, sector: str) -> int:
    return (
        db.query(func.count(Project.id))
        .filter(Project.sector == sector, Project.status != ARCHIVED)
        .scalar()
        or 0
    )


def total_project_investment(db: Session, sector: str | None = None) -> Decimal:
    """
    Sum of non-archived project costs. Costs are free text, so each is parsed
    (separators and currency stripped); values that do not parse are left out.
    """
    query = db.query(Project.project_cost).filter(
        Project.status != ARCHIVED,
        Project.project_cost.isnot(None),
    )
    if sector:
        query = query.filter(Project.sector == sector)
    total = Decimal("0")
    for (cost,) in query:
        amount = parse_amount(cost)
        if amount is not None:
            total += amount
    return total
