"""Downstream navigation signals emitted by the assistant tools.

Tools never touch the UI directly. They call a :class:`NavigationService`;
:class:`QueuedNavigationService` queues the requests for a UI loop to drain
on its own thread.
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from entitychat.logging import get_logger


logger = get_logger(__name__)


@runtime_checkable
class NavigationService(Protocol):
    def navigate_to_list_view(self, entity_name: str) -> None: ...

    def navigate_to_detail_view(self, entity_name: str, key_value: str) -> None: ...

    def filter_active_list(self, criteria: str) -> None: ...

    def clear_active_list_filter(self) -> None: ...

    def refresh_active_view(self) -> None: ...


@dataclass(frozen=True)
class NavigationRequest:
    entity_name: str
    key_value: str | None = None

    @property
    def is_detail(self) -> bool:
        return self.key_value is not None


@dataclass(frozen=True)
class FilterRequest:
    # None clears the filter
    criteria: str | None = None


class QueuedNavigationService:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._navigation: deque[NavigationRequest] = deque()
        self._filters: deque[FilterRequest] = deque()
        self._refresh_requested = False
        self._listeners: list[Callable[[str], None]] = []

    def subscribe(self, listener: Callable[[str], None]) -> None:
        """``listener`` receives ``navigation``, ``filter`` or ``refresh``."""

        with self._lock:
            self._listeners.append(listener)

    def _notify(self, kind: str) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(kind)

    def navigate_to_list_view(self, entity_name: str) -> None:
        with self._lock:
            self._navigation.append(NavigationRequest(entity_name))
        logger.info("Queued list navigation to %s", entity_name)
        self._notify("navigation")

    def navigate_to_detail_view(self, entity_name: str, key_value: str) -> None:
        with self._lock:
            self._navigation.append(NavigationRequest(entity_name, key_value))
        logger.info("Queued detail navigation to %s '%s'", entity_name, key_value)
        self._notify("navigation")

    def filter_active_list(self, criteria: str) -> None:
        with self._lock:
            self._filters.append(FilterRequest(criteria))
        logger.info("Queued list filter: %s", criteria)
        self._notify("filter")

    def clear_active_list_filter(self) -> None:
        with self._lock:
            self._filters.append(FilterRequest(None))
        logger.info("Queued list filter clear")
        self._notify("filter")

    def refresh_active_view(self) -> None:
        with self._lock:
            self._refresh_requested = True
        self._notify("refresh")

    def next_navigation(self) -> NavigationRequest | None:
        with self._lock:
            return self._navigation.popleft() if self._navigation else None

    def next_filter(self) -> FilterRequest | None:
        with self._lock:
            return self._filters.popleft() if self._filters else None

    def consume_refresh(self) -> bool:
        with self._lock:
            requested = self._refresh_requested
            self._refresh_requested = False
            return requested
