"""
Response Schema - Lenient normalization of model output.

Language models drift in field naming, casing and types between calls. This
module maps whatever they produce onto the canonical `DocumentFields` shape:

- field aliases are resolved through the ordered tables below (first
  non-null value wins)
- numeric strings are coerced ("22.40" -> 22.4); invalid numbers become absent
- unknown or missing classifications become "other"
- dates are normalized to YYYY-MM-DD, the original string kept as `dateRaw`

Normalization is a fixed point: validating `fields.to_payload()` again
returns the same fields.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any, TypeVar

from docagent.config import SchemaValidationError

from .models import DocumentFields, DocumentType, LineItem

__all__ = [
    "FIELD_ALIASES",
    "ITEM_FIELD_ALIASES",
    "DEFAULT_ITEM_DESCRIPTION",
    "coerce_number",
    "coerce_text",
    "coerce_document_type",
    "normalize_date",
    "normalize_line_item",
    "validate_document_data",
]

T = TypeVar("T")

# Canonical field -> accepted keys, in priority order
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "vendor": ("vendor", "store_name", "merchant", "business_name"),
    "amount": ("amount", "total", "total_amount"),
    "raw_text": ("rawText", "raw_text"),
}

ITEM_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "description": ("description", "name", "item"),
    "quantity": ("quantity", "qty"),
    "unit_price": ("unitPrice", "unit_price"),
    "total": ("total", "price", "amount"),
}

DEFAULT_ITEM_DESCRIPTION = "Unknown item"

# Printed receipts: M/D/YY or M/D/YYYY, possibly followed by a time
_MDY_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})\b")

_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%d-%b-%Y",
    "%a, %d %b %Y",
)


def coerce_number(value: Any) -> float | None:
    """Coerce a JSON scalar to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_text(value: Any) -> str | None:
    """Coerce a JSON scalar to a non-empty string, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def coerce_document_type(value: Any) -> DocumentType:
    """
    Map a model classification onto the closed enum.

    Raises:
        SchemaValidationError: The classification is a list or object, i.e.
            the model answered with more than one type
    """
    if isinstance(value, (list, dict)):
        raise SchemaValidationError(
            "Document type must be a single value",
            {"field": "type", "received": value},
        )
    if isinstance(value, str):
        key = value.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return DocumentType(key)
        except ValueError:
            pass
    return DocumentType.OTHER


def _first_present(
    data: Mapping[str, Any],
    keys: tuple[str, ...],
    coerce: Callable[[Any], T | None],
) -> T | None:
    for key in keys:
        value = coerce(data.get(key))
        if value is not None:
            return value
    return None


def _parse_generic_date(text: str) -> date | None:
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _parse_month_day_year(text: str) -> date | None:
    match = _MDY_PATTERN.match(text)
    if not match:
        return None
    month, day, year = match.groups()
    if len(year) == 2:
        full_year = 2000 + int(year)
    elif len(year) == 4:
        full_year = int(year)
    else:
        return None
    try:
        return date(full_year, int(month), int(day))
    except ValueError:
        return None


def normalize_date(value: str | None) -> str | None:
    """
    Normalize a date string to ISO format (YYYY-MM-DD).

    Tries ISO and common textual formats first, then M/D/YY(YY) with
    two-digit years read as 20YY. Returns None if nothing matches.
    """
    if not value:
        return None
    text = value.strip()
    parsed = _parse_generic_date(text) or _parse_month_day_year(text)
    return parsed.isoformat() if parsed else None


def normalize_line_item(data: Mapping[str, Any]) -> LineItem:
    """Normalize one line item, resolving description/price aliases."""
    return LineItem(
        description=_first_present(data, ITEM_FIELD_ALIASES["description"], coerce_text)
        or DEFAULT_ITEM_DESCRIPTION,
        quantity=_first_present(data, ITEM_FIELD_ALIASES["quantity"], coerce_number),
        unit_price=_first_present(data, ITEM_FIELD_ALIASES["unit_price"], coerce_number),
        total=_first_present(data, ITEM_FIELD_ALIASES["total"], coerce_number),
    )


def validate_document_data(payload: Any) -> DocumentFields:
    """
    Normalize a parsed model response into canonical document fields.

    Args:
        payload: Parsed JSON from the model

    Returns:
        Normalized fields; absent values are None

    Raises:
        SchemaValidationError: The payload is not a JSON object, or its
            type is not a single value
    """
    if not isinstance(payload, Mapping):
        raise SchemaValidationError(
            "Expected a JSON object",
            {"received": type(payload).__name__},
        )

    document_type = coerce_document_type(payload.get("type"))

    date_value = coerce_text(payload.get("date"))
    date_raw = coerce_text(payload.get("dateRaw")) or date_value

    items: list[LineItem] | None = None
    raw_items = payload.get("items")
    if isinstance(raw_items, list):
        items = [normalize_line_item(item) for item in raw_items if isinstance(item, Mapping)]

    return DocumentFields(
        type=document_type,
        vendor=_first_present(payload, FIELD_ALIASES["vendor"], coerce_text),
        amount=_first_present(payload, FIELD_ALIASES["amount"], coerce_number),
        date=normalize_date(date_value) or normalize_date(date_raw),
        date_raw=date_raw,
        items=items,
        raw_text=_first_present(payload, FIELD_ALIASES["raw_text"], coerce_text),
    )
