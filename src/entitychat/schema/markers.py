"""Declarative AI markers for business objects and their members.

Entity level markers are class decorators::

    @ai_visible()
    @ai_description("Product categories for organizing the catalog")
    class Category(BusinessObject):
        ...

Member level markers ride along in the SQLAlchemy ``info`` dictionary, next to
any other per-column metadata::

    notes: Mapped[str | None] = mapped_column(Text, info=ai_info(visible=False))

Markers are plain class attributes, so subclasses inherit them.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar


VISIBLE_ATTR = "__ai_visible__"
DESCRIPTION_ATTR = "__ai_description__"
INFO_KEY = "ai"

T = TypeVar("T", bound=type)


def ai_visible(visible: bool = True) -> Callable[[T], T]:
    """Opt an entity in to (or, with ``False``, out of) AI discovery."""

    def decorate(cls: T) -> T:
        setattr(cls, VISIBLE_ATTR, bool(visible))
        return cls

    return decorate


def ai_description(description: str) -> Callable[[T], T]:
    """Attach a human readable description used in prompts and tool output."""

    text = (description or "").strip()
    if not text:
        raise ValueError("ai_description requires a non-empty description")

    def decorate(cls: T) -> T:
        setattr(cls, DESCRIPTION_ATTR, text)
        return cls

    return decorate


def ai_info(*, visible: bool | None = None, description: str | None = None, **extra: Any) -> dict[str, Any]:
    """Build an ``info`` dict carrying member level AI markers.

    Extra keyword arguments are merged in at the top level so the result can
    also carry unrelated metadata.
    """

    marker: dict[str, Any] = {}
    if visible is not None:
        marker["visible"] = bool(visible)
    if description is not None:
        text = description.strip()
        if not text:
            raise ValueError("ai_info description must not be blank")
        marker["description"] = text
    return {**extra, INFO_KEY: marker}


def entity_visibility(cls: type) -> bool | None:
    """Return the entity marker value, or ``None`` when the class carries none."""

    value = getattr(cls, VISIBLE_ATTR, None)
    return None if value is None else bool(value)


def entity_description(cls: type) -> str | None:
    return getattr(cls, DESCRIPTION_ATTR, None) or None


def member_marker(info: dict[str, Any] | None) -> dict[str, Any]:
    marker = (info or {}).get(INFO_KEY)
    return marker if isinstance(marker, dict) else {}


def member_visibility(info: dict[str, Any] | None) -> bool | None:
    value = member_marker(info).get("visible")
    return None if value is None else bool(value)


def member_description(info: dict[str, Any] | None) -> str | None:
    value = member_marker(info).get("description")
    return value or None
