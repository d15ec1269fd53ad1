"""Response schema for the bulk project upload endpoint."""

from pydantic import BaseModel, Field


class BulkUploadResponse(BaseModel):
    """Outcome of a spreadsheet import. Skipped rows are counted, not listed."""

    message: str = "Upload processed"
    inserted: int = Field(..., ge=0, description="Projects created from valid rows.")
    skipped: int = Field(..., ge=0, description="Rows dropped for a missing name or sector.")
