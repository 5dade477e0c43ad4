"""What the user currently has open, shared between the UI and the tools."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

from entitychat.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class ActiveView:
    entity_name: str | None = None
    is_list_view: bool = False
    view_id: str | None = None
    current_object_key: str | None = None
    current_object_display: str | None = None

    @property
    def is_detail_view(self) -> bool:
        return self.entity_name is not None and not self.is_list_view

    def __str__(self) -> str:
        if self.entity_name is None:
            return "No active view"
        kind = "List" if self.is_list_view else "Detail"
        return f"{self.entity_name} ({kind} View)"


class ActiveViewContext:
    """Thread-safe holder of the active view.

    The UI layer calls :meth:`update` on every view change. Tools only read
    :meth:`snapshot`, which may already be stale by the time it is used.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._view = ActiveView()
        self._listeners: list[Callable[[ActiveView], None]] = []

    def update(
        self,
        entity_name: str | None,
        *,
        is_list_view: bool,
        view_id: str | None = None,
        object_key: str | None = None,
        object_display: str | None = None,
    ) -> ActiveView:
        view = ActiveView(
            entity_name=entity_name,
            is_list_view=is_list_view,
            view_id=view_id,
            current_object_key=None if is_list_view else object_key,
            current_object_display=None if is_list_view else object_display,
        )
        with self._lock:
            self._view = view
            listeners = list(self._listeners)
        logger.info("Active view: %s (key=%s)", view, view.current_object_key)
        for listener in listeners:
            listener(view)
        return view

    def clear(self) -> None:
        view = ActiveView()
        with self._lock:
            self._view = view
            listeners = list(self._listeners)
        logger.info("Active view cleared")
        for listener in listeners:
            listener(view)

    def snapshot(self) -> ActiveView:
        with self._lock:
            return self._view

    def subscribe(self, listener: Callable[[ActiveView], None]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[ActiveView], None]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def entity_name(self) -> str | None:
        return self.snapshot().entity_name

    @property
    def is_list_view(self) -> bool:
        return self.snapshot().is_list_view

    def __str__(self) -> str:
        return str(self.snapshot())
