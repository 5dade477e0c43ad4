from __future__ import annotations

from typing import Any


# Probed in order; the first attribute holding a value is the label.
DISPLAY_LABEL_ATTRIBUTES = (
    "name",
    "company_name",
    "title",
    "full_name",
    "first_name",
    "description",
    "invoice_number",
)


def display_label(obj: Any) -> str:
    """Human readable label used to match and identify records."""

    if obj is None:
        return "null"
    for attr in DISPLAY_LABEL_ATTRIBUTES:
        value = getattr(obj, attr, None)
        if value is not None:
            return str(value)
    return str(obj)


def label_matches(obj: Any, term: str) -> bool:
    return text_contains(display_label(obj), term)


def text_contains(value: Any, term: str) -> bool:
    """Case-insensitive substring test using Unicode case folding."""

    if value is None:
        return False
    return (term or "").casefold() in str(value).casefold()
