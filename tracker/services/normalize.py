"""Normalize loosely typed project/scholarship values (form fields, spreadsheet cells)."""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

PROJECT_STATUSES = ("planned", "ongoing", "completed", "archived")
ARCHIVED = "archived"
DEFAULT_STATUS = "planned"

CATEGORIES = ("infra", "support")
DEFAULT_CATEGORY = "infra"

# Category spellings seen in spreadsheets (case-insensitive) -> canonical category.
_CATEGORY_ALIASES: dict[str, str] = {
    "infra": "infra",
    "infrastructure": "infra",
    "support": "support",
}

# Anything but digits and the decimal point is dropped from costs on write.
_COST_STRIP_RE = re.compile(r"[^0-9.]")
# Currency codes/symbols, thousands separators and whitespace, dropped before a numeric cast.
_AMOUNT_NOISE_RE = re.compile(r"(GH₵|GHS|GHC|₵|\$|,|\s)", re.IGNORECASE)


def cell_text(value: object) -> str:
    """Render a raw cell or form value as trimmed text. Integral floats lose their '.0'."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def clean_text(value: object) -> str | None:
    """Trimmed text, or None when empty."""
    text = cell_text(value)
    return text or None


def normalize_tag(value: object, default: str | None = None) -> str | None:
    """Lower-case and trim a tag (sector, status); fall back to default when empty."""
    text = cell_text(value).lower()
    return text or default


def normalize_category(value: object, default: str | None = DEFAULT_CATEGORY) -> str | None:
    text = cell_text(value).lower()
    if not text:
        return default
    return _CATEGORY_ALIASES.get(text, text)


def derive_community(locations: str | None) -> str:
    """Community is the first comma-separated segment of the locations text."""
    if not locations:
        return ""
    return locations.split(",")[0].strip()


def clean_cost(value: object) -> str | None:
    """Keep only digits and '.' from a cost entry; None when nothing is left."""
    text = _COST_STRIP_RE.sub("", cell_text(value))
    return text or None


def coerce_int(value: object) -> int | None:
    """
    Parse an integer from int, integral float or numeric text ("2025", "2025.0", "1,500").
    Returns None for empty or unparseable input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = cell_text(value).replace(",", "")
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if number != number.to_integral_value():
        return None
    return int(number)


def parse_amount(value: object) -> Decimal | None:
    """
    Parse a free-text money value ("GHS 1,500.00", "$200", "50000").
    Returns None when the text does not cast to a number.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Decimal(str(value))
    text = _AMOUNT_NOISE_RE.sub("", str(value))
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def format_investment(total: Decimal | float) -> str:
    """Short display form of a cedi total: GHS 1.2M, GHS 50.0K, GHS 900."""
    total = float(total)
    if total >= 1_000_000:
        return f"GHS {total / 1_000_000:.1f}M"
    if total >= 1_000:
        return f"GHS {total / 1_000:.1f}K"
    return f"GHS {total:,.2f}".rstrip("0").rstrip(".")
