from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest

from entitychat.assistant.pairs import coerce_value, format_value, parse_pairs
from entitychat.schema import PropertyMetadata


class Priority(enum.Enum):
    Low = 1
    High = 2


def _prop(python_type, *, required=True, enum_class=None):
    return PropertyMetadata(
        name="field",
        type_name="x",
        python_type=python_type,
        required=required,
        storage_name="field",
        enum_class=enum_class,
    )


def test_parse_pairs_string_form():
    assert parse_pairs(" Name = chai ; limit=3;; =skip; novalue ;url=a=b") == [
        ("Name", "chai"),
        ("limit", "3"),
        ("url", "a=b"),
    ]


@pytest.mark.parametrize("empty", [None, "", "   ", [], {}])
def test_parse_pairs_empty_inputs(empty):
    assert parse_pairs(empty) == []


def test_parse_pairs_structured_forms():
    assert parse_pairs({"name": "Chai", "discontinued": True, "notes": None}) == [
        ("name", "Chai"),
        ("discontinued", "true"),
        ("notes", ""),
    ]
    assert parse_pairs(["name=Chai", {"key": "units", "value": 3}, ("price", 1.5)]) == [
        ("name", "Chai"),
        ("units", "3"),
        ("price", "1.5"),
    ]


def test_parse_pairs_rejects_unsupported_values():
    with pytest.raises(ValueError):
        parse_pairs(42)
    with pytest.raises(ValueError):
        parse_pairs([object()])


@pytest.mark.parametrize(
    "python_type, raw, expected",
    [
        (str, "Chai", "Chai"),
        (int, " 42 ", 42),
        (float, "1.5", 1.5),
        (Decimal, "18.00", Decimal("18.00")),
        (bool, "Yes", True),
        (bool, "off", False),
        (datetime, "2024-03-01T10:30:00", datetime(2024, 3, 1, 10, 30)),
        (date, "2024-03-01", date(2024, 3, 1)),
        (date, "2024-03-01T10:30:00", date(2024, 3, 1)),
        (uuid.UUID, "12345678-1234-5678-1234-567812345678", uuid.UUID("12345678-1234-5678-1234-567812345678")),
    ],
)
def test_coerce_value_by_type(python_type, raw, expected):
    assert coerce_value(_prop(python_type), raw) == expected


def test_coerce_value_enum_by_name_or_value():
    prop = _prop(Priority, enum_class=Priority)

    assert coerce_value(prop, "high") is Priority.High
    assert coerce_value(prop, "1") is Priority.Low
    with pytest.raises(ValueError, match="Low, High"):
        coerce_value(prop, "urgent")


def test_blank_optional_value_becomes_none():
    assert coerce_value(_prop(int, required=False), "  ") is None


@pytest.mark.parametrize(
    "python_type, raw",
    [(int, "many"), (Decimal, "cheap"), (bool, "maybe"), (date, "yesterday")],
)
def test_coerce_value_rejects_bad_text(python_type, raw):
    with pytest.raises(ValueError):
        coerce_value(_prop(python_type), raw)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "N/A"),
        (datetime(2024, 3, 1, 10, 30), "2024-03-01"),
        (date(2024, 3, 1), "2024-03-01"),
        (Decimal("18"), "18.00"),
        (2.5, "2.50"),
        (Priority.High, "High"),
        (True, "True"),
        ("Chai", "Chai"),
    ],
)
def test_format_value(value, expected):
    assert format_value(value) == expected
