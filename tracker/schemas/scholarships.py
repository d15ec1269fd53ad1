"""Request/response schemas for scholarship endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from tracker.services.normalize import clean_text, coerce_int, parse_amount


class _ScholarshipFields(BaseModel):
    beneficiary_name: str | None = Field(default=None, max_length=255)
    institution: str | None = Field(default=None, max_length=255)
    amount: Decimal | None = Field(default=None, ge=0)
    year: int | None = Field(default=None, ge=1900, le=2200)
    status: str | None = Field(default=None, max_length=32)
    category: str | None = Field(default=None, max_length=64)

    @field_validator("beneficiary_name", "institution", "status", "category", mode="before")
    @classmethod
    def _strip(cls, v: object) -> str | None:
        return clean_text(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: object) -> Decimal | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        amount = parse_amount(v)
        if amount is None:
            raise ValueError("must be a number")
        return amount

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, v: object) -> int | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        year = coerce_int(v)
        if year is None:
            raise ValueError("must be a whole number")
        return year


class ScholarshipInput(_ScholarshipFields):
    """New scholarship; beneficiary name and institution are required."""

    status: str = Field(default="Pending", max_length=32)
    category: str = Field(default="Tertiary", max_length=64)

    @field_validator("status", mode="before")
    @classmethod
    def _status_default(cls, v: object) -> str:
        return clean_text(v) or "Pending"

    @field_validator("category", mode="before")
    @classmethod
    def _category_default(cls, v: object) -> str:
        return clean_text(v) or "Tertiary"


class ScholarshipUpdate(_ScholarshipFields):
    pass


class ScholarshipOut(BaseModel):
    id: int
    beneficiary_name: str
    institution: str
    amount: Decimal | None = None
    year: int | None = None
    status: str
    category: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class ScholarshipListResponse(BaseModel):
    scholarships: list[ScholarshipOut]


class ScholarshipCreatedResponse(BaseModel):
    id: int
    message: str = "Scholarship added"
