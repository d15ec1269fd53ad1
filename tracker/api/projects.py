"""Project endpoints: filtered listing, CRUD with soft delete, template download and bulk upload."""

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query, Request, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from tracker.api.deps import (
    Audit,
    Cache,
    DbSession,
    Deleter,
    Editor,
    RequestAudit,
    Uploader,
    validation_message,
)
from tracker.core.cache import ResponseCache
from tracker.core.config import settings
from tracker.core.errors import ValidationError
from tracker.schemas.common import MessageResponse
from tracker.schemas.projects import (
    PROJECT_FIELDS,
    ProjectCreatedResponse,
    ProjectFilters,
    ProjectInput,
    ProjectListResponse,
    ProjectOut,
    ProjectUpdate,
)
from tracker.schemas.upload import BulkUploadResponse
from tracker.services import ingest, projects
from tracker.services.images import discard_project_image, save_project_image
from tracker.services.normalize import CATEGORIES, PROJECT_STATUSES, clean_text

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_WORKBOOK_EXTENSIONS = (".xlsx", ".xlsm")
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _is_upload_file(obj: object) -> bool:
    """True if obj is an uploaded file (UploadFile or file-like with filename and read)."""
    if isinstance(obj, UploadFile):
        return True
    return (
        hasattr(obj, "read")
        and callable(getattr(obj, "read", None))
        and hasattr(obj, "filename")
    )


async def _read_project_payload(request: Request) -> tuple[dict[str, Any], Any]:
    """
    Project fields and optional image from a JSON body or a multipart form.
    Unknown fields are ignored; the image is the multipart 'image' part.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type == "application/json":
        try:
            body = await request.json()
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e!s}") from e
        if not isinstance(body, dict):
            raise ValidationError("JSON body must be an object.")
        return {k: v for k, v in body.items() if k in PROJECT_FIELDS}, None
    if content_type in ("multipart/form-data", "application/x-www-form-urlencoded"):
        form = await request.form()
        image = form.get("image")
        if image is not None and not _is_upload_file(image):
            image = None
        if image is not None and not getattr(image, "filename", None):
            image = None
        fields = {
            k: v for k, v in form.items() if k in PROJECT_FIELDS and isinstance(v, str)
        }
        return fields, image
    raise ValidationError(
        "Content-Type must be application/json or multipart/form-data."
    )


def _check_workflow_fields(status: str | None, category: str | None) -> None:
    if status is not None and status not in PROJECT_STATUSES:
        raise ValidationError("Invalid status. Use one of: " + ", ".join(PROJECT_STATUSES))
    if category is not None and category not in CATEGORIES:
        raise ValidationError("Invalid category. Use one of: " + ", ".join(CATEGORIES))


async def _read_image(image: Any) -> tuple[str | None, bytes] | None:
    """Filename and bytes of an uploaded image part."""
    if image is None:
        return None
    return image.filename, await image.read()


def _store_image(image: tuple[str | None, bytes] | None) -> str | None:
    if image is None:
        return None
    filename, content = image
    return save_project_image(
        settings.UPLOAD_DIR,
        filename,
        content,
        settings.MAX_IMAGE_FILE_BYTES,
    )


def _create_project(
    db: Session,
    data: ProjectInput,
    image: tuple[str | None, bytes] | None,
    cache: ResponseCache,
    audit: RequestAudit,
) -> ProjectCreatedResponse:
    image_url = _store_image(image)
    try:
        project = projects.create_project(db, data, image_url)
    except Exception:
        discard_project_image(settings.UPLOAD_DIR, image_url)
        raise
    cache.clear()
    audit("CREATE_PROJECT", {"id": project.id, "name": project.name})
    return ProjectCreatedResponse(id=project.id, image_url=image_url)


def _update_project(
    db: Session,
    project_id: int,
    changes: ProjectUpdate,
    image: tuple[str | None, bytes] | None,
    cache: ResponseCache,
    audit: RequestAudit,
) -> None:
    projects.check_update(changes)
    projects.get_project(db, project_id)
    image_url = _store_image(image)
    try:
        written = projects.update_project(db, project_id, changes, image_url)
    except Exception:
        discard_project_image(settings.UPLOAD_DIR, image_url)
        raise
    cache.clear()
    audit("UPDATE_PROJECT", {"id": project_id, "changes": sorted(written)})


def _ingest(
    db: Session,
    content: bytes,
    cache: ResponseCache,
    audit: RequestAudit,
) -> BulkUploadResponse:
    result = ingest.ingest_workbook(db, content)
    cache.clear()
    audit("BULK_UPLOAD", {"inserted": result.inserted, "skipped": result.skipped})
    return BulkUploadResponse(inserted=result.inserted, skipped=result.skipped)


@router.get("", response_model=ProjectListResponse)
def list_projects(
    filters: Annotated[ProjectFilters, Query()],
    db: DbSession,
    cache: Cache,
) -> ProjectListResponse:
    """
    Page of projects, newest first. Filters combine with AND; `sector`, `status`
    and `funding` accept `all`. Archived projects only appear with status=archived.
    """
    return cache.get_or_compute(
        "projects",
        filters.model_dump(),
        lambda: projects.list_projects(db, filters),
    )


@router.get("/template")
def download_template() -> Response:
    """Spreadsheet with the recognized header row and one example row."""
    return Response(
        content=ingest.build_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{ingest.TEMPLATE_FILENAME}"'
        },
    )


@router.post("/bulk-upload", response_model=BulkUploadResponse)
async def bulk_upload(
    request: Request,
    _user: Uploader,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> BulkUploadResponse:
    """
    Import projects from a multipart `file` (.xlsx). The header row is found
    within the first 10 rows; rows without a name or sector are skipped and
    counted. Valid rows are inserted in one transaction.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type != "multipart/form-data":
        raise ValidationError("No file uploaded")
    form = await request.form()
    file = form.get("file")
    if file is None or not _is_upload_file(file):
        # Some clients send the file under another name; use first file-like part.
        file = next((v for v in form.values() if _is_upload_file(v)), None)
    if file is None:
        raise ValidationError("No file uploaded")
    filename = (getattr(file, "filename", None) or "").lower()
    if not filename.endswith(ALLOWED_WORKBOOK_EXTENSIONS):
        raise ValidationError("Uploaded file must be an Excel workbook (.xlsx).")
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_FILE_BYTES:
        raise ValidationError(
            f"File size must not exceed {settings.MAX_UPLOAD_FILE_BYTES // (1024 * 1024)} MB."
        )
    # Parsing and the insert transaction run in the worker pool.
    return await run_in_threadpool(_ingest, db, content, cache, audit)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, db: DbSession) -> ProjectOut:
    """Single project by id, including archived ones."""
    return ProjectOut.model_validate(projects.get_project(db, project_id))


@router.post("", response_model=ProjectCreatedResponse, status_code=201)
async def create_project(
    request: Request,
    _user: Editor,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> ProjectCreatedResponse:
    """
    Create a project from JSON or multipart form fields (with an optional `image`
    file). name and sector are required; status defaults to planned and
    category to infra.
    """
    fields, image = await _read_project_payload(request)
    if not clean_text(fields.get("name")) or not clean_text(fields.get("sector")):
        raise ValidationError("Name and Sector are required")
    try:
        data = ProjectInput.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(validation_message(e.errors())) from e
    _check_workflow_fields(data.status, data.category)
    upload = await _read_image(image)
    return await run_in_threadpool(_create_project, db, data, upload, cache, audit)


@router.put("/{project_id}", response_model=MessageResponse)
async def update_project(
    project_id: int,
    request: Request,
    _user: Editor,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> MessageResponse:
    """Update the fields sent (JSON or multipart); a new `image` replaces the old reference."""
    fields, image = await _read_project_payload(request)
    try:
        changes = ProjectUpdate.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(validation_message(e.errors())) from e
    _check_workflow_fields(changes.status, changes.category)
    upload = await _read_image(image)
    await run_in_threadpool(_update_project, db, project_id, changes, upload, cache, audit)
    return MessageResponse(message="Project updated")


@router.delete("/{project_id}", response_model=MessageResponse)
def archive_project(
    project_id: int,
    _user: Deleter,
    db: DbSession,
    cache: Cache,
    audit: Audit,
) -> MessageResponse:
    """Soft delete: the project is archived and drops out of default listings."""
    projects.archive_project(db, project_id)
    cache.clear()
    audit("DELETE_PROJECT", {"id": project_id})
    return MessageResponse(message="Project archived")
