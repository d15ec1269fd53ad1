"""
Bulk project import from an uploaded workbook.

The first sheet is read as raw rows. A header row containing both "name" and
"sector" is searched for within the first HEADER_SEARCH_ROWS rows (sheets often
start with a title block), known columns are mapped through an alias table, and
every following row with a name and a sector becomes a project. All rows are
inserted in one transaction.
"""

import logging
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass
from io import BytesIO

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.orm import Session

from tracker.core.errors import IngestFormatError
from tracker.schemas.projects import ProjectInput
from tracker.services.normalize import (
    DEFAULT_STATUS,
    cell_text,
    clean_cost,
    coerce_int,
    derive_community,
    normalize_category,
    normalize_tag,
)
from tracker.services.projects import build_project

logger = logging.getLogger(__name__)

HEADER_SEARCH_ROWS = 10
REQUIRED_HEADERS = ("name", "sector")

# Header text (lower-cased, trimmed) -> project field.
COLUMN_ALIASES: dict[str, str] = {
    "name": "name",
    "locations": "locations",
    "location": "locations",
    "sector": "sector",
    "year": "year",
    "status": "status",
    "category": "category",
    "community": "community",
    "project_cost": "project_cost",
    "cost": "project_cost",
    "funding_source": "funding_source",
    "funding": "funding_source",
    "beneficiary_count": "beneficiary_count",
    "beneficiaries": "beneficiary_count",
    "contractor": "contractor",
    "description": "description",
}

TEMPLATE_SHEET = "Template"
TEMPLATE_FILENAME = "Project_Upload_Template.xlsx"
TEMPLATE_HEADERS = (
    "Name",
    "Locations",
    "Sector",
    "Category",
    "Year",
    "Status",
    "Cost",
    "Funding",
    "Beneficiaries",
    "Contractor",
    "Description",
)
TEMPLATE_EXAMPLE_ROW = (
    "Example School Block",
    "Tamale, Northern",
    "Education",
    "Infrastructure",
    "2025",
    "Planned",
    "50000",
    "MP Common Fund",
    "1500",
    "ABC Construction",
    "Construction of a 3-unit classroom block",
)

HEADER_NOT_FOUND_MESSAGE = (
    'Invalid file format. Header row with "Name" and "Sector" not found.'
)


@dataclass(frozen=True)
class HeaderMatch:
    """Where the header row is and which column index feeds each project field."""

    row_index: int
    columns: dict[str, int]


@dataclass(frozen=True)
class IngestResult:
    inserted: int
    skipped: int


def read_rows(content: bytes) -> list[tuple]:
    """All rows of the first worksheet as tuples of raw cell values."""
    try:
        wb = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
        raise IngestFormatError("Unable to read workbook. Upload an .xlsx file.") from e
    try:
        if not wb.worksheets:
            raise IngestFormatError("Workbook has no worksheets.")
        return list(wb.worksheets[0].iter_rows(values_only=True))
    finally:
        wb.close()


def map_columns(header: Sequence[object]) -> dict[str, int]:
    """
    Map project fields to column indexes. A column spelled exactly like the
    field wins over an alias; otherwise the leftmost matching column wins.
    """
    columns: dict[str, int] = {}
    exact: set[str] = set()
    for idx, cell in enumerate(header):
        key = cell_text(cell).lower()
        field = COLUMN_ALIASES.get(key)
        if field is None or field in exact:
            continue
        if key == field:
            columns[field] = idx
            exact.add(field)
        elif field not in columns:
            columns[field] = idx
    return columns


def locate_header(rows: Sequence[Sequence[object]], window: int = HEADER_SEARCH_ROWS) -> HeaderMatch:
    """First row within the window whose cells include every required header."""
    for idx, row in enumerate(rows[:window]):
        cells = {cell_text(c).lower() for c in row}
        if all(h in cells for h in REQUIRED_HEADERS):
            return HeaderMatch(row_index=idx, columns=map_columns(row))
    raise IngestFormatError(HEADER_NOT_FOUND_MESSAGE)


def _cell(row: Sequence[object], idx: int | None) -> object:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def row_to_project(row: Sequence[object], columns: dict[str, int]) -> ProjectInput | None:
    """Normalized project for a data row, or None when name or sector is missing."""
    raw = {field: _cell(row, idx) for field, idx in columns.items()}
    name = cell_text(raw.get("name"))
    sector = normalize_tag(raw.get("sector"))
    if not name or not sector:
        return None
    locations = cell_text(raw.get("locations"))
    beneficiaries = coerce_int(raw.get("beneficiary_count"))
    # model_construct: spreadsheet values are already normalized and must not be rejected.
    return ProjectInput.model_construct(
        name=name,
        locations=locations,
        sector=sector,
        year=coerce_int(raw.get("year")),
        status=normalize_tag(raw.get("status"), DEFAULT_STATUS),
        category=normalize_category(raw.get("category")),
        community=cell_text(raw.get("community")) or derive_community(locations),
        project_cost=clean_cost(raw.get("project_cost")),
        funding_source=cell_text(raw.get("funding_source")) or None,
        beneficiary_count=beneficiaries if beneficiaries is None or beneficiaries >= 0 else None,
        contractor=cell_text(raw.get("contractor")) or None,
        description=cell_text(raw.get("description")) or None,
    )


def _is_blank(row: Sequence[object]) -> bool:
    return all(cell_text(c) == "" for c in row)


def plan_rows(rows: Sequence[Sequence[object]]) -> tuple[list[ProjectInput], int]:
    """Locate the header and split the data rows into (valid projects, skipped count)."""
    header = locate_header(rows)
    valid: list[ProjectInput] = []
    skipped = 0
    for row in rows[header.row_index + 1 :]:
        if _is_blank(row):
            continue
        project = row_to_project(row, header.columns)
        if project is None:
            skipped += 1
        else:
            valid.append(project)
    return valid, skipped


def ingest_workbook(db: Session, content: bytes) -> IngestResult:
    """
    Import projects from workbook bytes.

    Either every valid row is committed or, on a storage error, none are (the
    error propagates after rollback). Rows without a name or sector are skipped.
    """
    projects, skipped = plan_rows(read_rows(content))
    try:
        db.add_all([build_project(p) for p in projects])
        db.flush()
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Bulk upload rolled back: %s rows not inserted", len(projects))
        raise
    logger.info("Bulk upload committed: inserted=%s skipped=%s", len(projects), skipped)
    return IngestResult(inserted=len(projects), skipped=skipped)


def build_template() -> bytes:
    """The upload template: header row plus one example row."""
    wb = Workbook()
    ws = wb.active
    ws.title = TEMPLATE_SHEET
    ws.append(list(TEMPLATE_HEADERS))
    ws.append(list(TEMPLATE_EXAMPLE_ROW))
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
