"""
Tests for the response schema normalizer.
"""

from __future__ import annotations

import pytest

from docagent.config import SchemaValidationError

from .models import DocumentType
from .schema import (
    coerce_document_type,
    coerce_number,
    normalize_date,
    normalize_line_item,
    validate_document_data,
)


# --- Document type ---


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"type": None},
        {"type": "purchase_order"},
        {"type": ""},
        {"type": 42},
    ],
)
def test_type_falls_back_to_other(payload: dict) -> None:
    """Missing, null or unknown classifications become other."""
    assert validate_document_data(payload).type is DocumentType.OTHER


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("receipt", DocumentType.RECEIPT),
        ("Invoice", DocumentType.INVOICE),
        ("bank statement", DocumentType.BANK_STATEMENT),
        ("bank-statement", DocumentType.BANK_STATEMENT),
        ("other", DocumentType.OTHER),
    ],
)
def test_type_recognized_values(raw: str, expected: DocumentType) -> None:
    assert coerce_document_type(raw) is expected


def test_type_list_is_a_validation_error() -> None:
    """A model answering with several types cannot be normalized."""
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_document_data({"type": ["receipt", "invoice"]})

    assert exc_info.value.details["field"] == "type"


def test_non_object_payload_is_a_validation_error() -> None:
    with pytest.raises(SchemaValidationError):
        validate_document_data(["receipt"])


# --- Numbers ---


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("22.40", 22.4),
        (" 7 ", 7.0),
        (15, 15.0),
        (-12.5, -12.5),
        ("-3.10", -3.1),
    ],
)
def test_numeric_strings_are_coerced(raw: object, expected: float) -> None:
    assert coerce_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize(
    "raw", ["abc", "", "12.4.5", "1_000", "nan", "inf", 10**400, None, True, [1], {}]
)
def test_invalid_numbers_become_absent(raw: object) -> None:
    assert coerce_number(raw) is None


def test_oversized_integer_amount_is_absent() -> None:
    """Integers beyond float range are dropped instead of raising."""
    fields = validate_document_data(
        {"type": "receipt", "amount": int("9" * 400), "items": [{"qty": 10**400}]}
    )

    assert fields.amount is None
    assert fields.items is not None
    assert fields.items[0].quantity is None


def test_negative_amount_preserved() -> None:
    """Refunds and credits keep their sign."""
    fields = validate_document_data({"type": "receipt", "amount": -19.99})
    assert fields.amount == pytest.approx(-19.99)


def test_invalid_amount_is_absent_not_an_error() -> None:
    fields = validate_document_data({"amount": "twenty dollars"})
    assert fields.amount is None
    assert "amount" not in fields.to_payload()


# --- Aliases ---


def test_vendor_alias_priority() -> None:
    fields = validate_document_data(
        {"merchant": "Corner Shop", "store_name": "Corner Shop #12", "business_name": "CS LLC"}
    )
    assert fields.vendor == "Corner Shop #12"


def test_vendor_skips_null_aliases() -> None:
    fields = validate_document_data({"vendor": None, "store_name": None, "merchant": "Deli"})
    assert fields.vendor == "Deli"


@pytest.mark.parametrize("key", ["amount", "total", "total_amount"])
def test_amount_aliases(key: str) -> None:
    assert validate_document_data({key: "41.10"}).amount == pytest.approx(41.1)


def test_line_item_total_wins_over_price() -> None:
    item = normalize_line_item({"description": "Milk", "total": 4.5, "price": 2.25})
    assert item.total == 4.5


@pytest.mark.parametrize("key", ["price", "amount"])
def test_line_item_total_from_alias(key: str) -> None:
    item = normalize_line_item({"name": "Bread", key: "3.99"})
    assert item.total == pytest.approx(3.99)
    assert item.description == "Bread"


def test_line_item_description_default() -> None:
    item = normalize_line_item({"qty": "2", "unit_price": "1.50"})
    assert item.description == "Unknown item"
    assert item.quantity == 2.0
    assert item.unit_price == 1.5


def test_items_skip_non_objects() -> None:
    fields = validate_document_data({"items": [{"item": "Eggs", "price": 3}, "garbage", None]})
    assert fields.items is not None
    assert [i.description for i in fields.items] == ["Eggs"]


def test_items_not_a_list_become_absent() -> None:
    assert validate_document_data({"items": "none"}).items is None


# --- Nulls ---


def test_nulls_become_absent() -> None:
    fields = validate_document_data(
        {
            "type": "invoice",
            "vendor": None,
            "amount": None,
            "date": None,
            "items": None,
            "rawText": None,
        }
    )

    assert fields.to_payload() == {"type": "invoice"}


# --- Dates ---


def test_short_us_date() -> None:
    assert normalize_date("3/5/24") == "2024-03-05"


def test_long_us_date_with_time() -> None:
    assert normalize_date("12/31/2023 14:05") == "2023-12-31"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-03-05", "2024-03-05"),
        ("2024-03-05T10:30:00", "2024-03-05"),
        ("March 5, 2024", "2024-03-05"),
        ("5 Mar 2024", "2024-03-05"),
        ("2024/03/05", "2024-03-05"),
    ],
)
def test_generic_dates(raw: str, expected: str) -> None:
    assert normalize_date(raw) == expected


@pytest.mark.parametrize("raw", ["not-a-date", "13/45/24", "3/5/202", "", None])
def test_unparseable_dates(raw: str | None) -> None:
    assert normalize_date(raw) is None


def test_unparseable_date_keeps_raw() -> None:
    fields = validate_document_data({"date": "not-a-date"})

    assert fields.date is None
    assert fields.date_raw == "not-a-date"


def test_parsed_date_keeps_raw() -> None:
    fields = validate_document_data({"date": "3/5/24"})

    assert fields.date == "2024-03-05"
    assert fields.date_raw == "3/5/24"


# --- Idempotence ---


@pytest.mark.parametrize(
    "payload",
    [
        {
            "type": "Receipt",
            "store_name": "  Trader Joe's ",
            "total": "22.40",
            "date": "3/5/24",
            "items": [
                {"name": "Bananas", "qty": "2", "price": "0.58"},
                {"description": "Coffee", "total": 8.99, "price": 9.99},
                {},
            ],
            "raw_text": "TRADER JOE'S ...",
        },
        {"type": "bank statement", "amount": -120, "date": "not-a-date"},
        {"type": None, "vendor": None},
    ],
)
def test_validation_is_a_fixed_point(payload: dict) -> None:
    first = validate_document_data(payload)
    second = validate_document_data(first.to_payload())

    assert second == first
    assert second.to_payload() == first.to_payload()
