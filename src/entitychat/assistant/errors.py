"""Recoverable tool failures.

These are raised inside the tool implementations and turned into plain text
at the tool boundary so the conversation can continue. Database errors are
not part of this hierarchy and propagate to the caller.
"""

from __future__ import annotations


class ToolError(Exception):
    """Base class for errors that are reported back to the model as text."""


class NotFoundError(ToolError):
    """Unknown entity, record or relationship target."""


class ToolValidationError(ToolError):
    """Missing or malformed tool arguments."""


class ConversionError(ToolError):
    def __init__(self, key: str, value: str, type_name: str, message: str | None = None):
        self.key = key
        self.value = value
        self.type_name = type_name
        super().__init__(
            message or f"Cannot convert value '{value}' to type '{type_name}' for property '{key}'."
        )
