"""The ``key=value;key=value`` mini-language and scalar value conversion."""

from __future__ import annotations

import enum
import uuid
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from entitychat.schema.metadata import PropertyMetadata


_TRUE_VALUES = {"true", "yes", "y", "1", "on"}
_FALSE_VALUES = {"false", "no", "n", "0", "off"}


def _parse_pair_string(text: str) -> list[tuple[str, str]]:
    # no escaping: values cannot contain ';' and the first '=' splits
    pairs: list[tuple[str, str]] = []
    for segment in text.split(";"):
        index = segment.find("=")
        if index <= 0:
            continue
        key = segment[:index].strip()
        value = segment[index + 1 :].strip()
        if key:
            pairs.append((key, value))
    return pairs


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


def parse_pairs(value: Any) -> list[tuple[str, str]]:
    """Normalize a filter or property list into ``(key, value)`` pairs.

    Accepts the delimited string form, a mapping, or a list whose items are
    ``(key, value)`` sequences, ``{"key": ..., "value": ...}`` dicts or
    ``"key=value"`` strings. Keys keep their input casing.
    """

    if value is None:
        return []
    if isinstance(value, str):
        return _parse_pair_string(value) if value.strip() else []
    if isinstance(value, Mapping):
        return [(str(k).strip(), _stringify(v)) for k, v in value.items() if str(k).strip()]

    pairs: list[tuple[str, str]] = []
    if isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, str):
                pairs.extend(_parse_pair_string(item))
            elif isinstance(item, Mapping):
                key = str(item.get("key") or item.get("name") or "").strip()
                if key:
                    pairs.append((key, _stringify(item.get("value"))))
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                key = str(item[0]).strip()
                if key:
                    pairs.append((key, _stringify(item[1])))
            else:
                raise ValueError(f"Unsupported property pair: {item!r}")
        return pairs
    raise ValueError(f"Unsupported property list of type {type(value).__name__}")


def _parse_enum(raw: str, enum_class: type[enum.Enum]) -> enum.Enum:
    needle = raw.strip().lower()
    for member in enum_class:
        if member.name.lower() == needle:
            return member
    for member in enum_class:
        if str(member.value).lower() == needle:
            return member
    names = ", ".join(member.name for member in enum_class)
    raise ValueError(f"'{raw}' is not one of {names}")


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"'{raw}' is not a boolean")


def _parse_date(raw: str) -> date:
    text = raw.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


def coerce_value(prop: PropertyMetadata, raw: str | None) -> Any:
    """Convert ``raw`` text to the semantic type of ``prop``.

    Blank input on an optional property becomes ``None``. Raises
    :class:`ValueError` when the text cannot be converted.
    """

    if raw is None:
        return None
    if not raw.strip() and not prop.required:
        return None

    target = prop.python_type
    if prop.enum_class is not None:
        return _parse_enum(raw, prop.enum_class)
    if target is None or target is str:
        return raw
    if target is bool:
        return _parse_bool(raw)
    if target is int:
        return int(raw.strip())
    if target is float:
        return float(raw.strip())
    if target is Decimal:
        try:
            return Decimal(raw.strip())
        except InvalidOperation as exc:
            raise ValueError(f"'{raw}' is not a decimal number") from exc
    if target is datetime:
        return datetime.fromisoformat(raw.strip())
    if target is date:
        return _parse_date(raw)
    if target is time:
        return time.fromisoformat(raw.strip())
    if target is uuid.UUID:
        return uuid.UUID(raw.strip())
    return target(raw)


def format_value(value: Any) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, (float, Decimal)):
        return f"{value:.2f}"
    if isinstance(value, enum.Enum):
        return value.name
    return str(value)
