"""In-memory log capture for an in-app assistant diagnostics panel.

Only the loggers listed in :data:`TRACKED_CATEGORIES` are captured, each under
a short category label. The store keeps the newest ``max_entries`` records.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime


MAX_ENTRIES = 500

TRACKED_CATEGORIES: dict[str, str] = {
    "entitychat.assistant.tools": "Tools",
    "entitychat.assistant.chat": "ChatService",
    "entitychat.assistant.service": "ChatService",
    "entitychat.assistant.navigation": "Navigation",
    "entitychat.assistant.context": "ViewTracker",
}


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    level: str
    category: str
    message: str


class LogStore:
    def __init__(self, max_entries: int = MAX_ENTRIES):
        self._entries: deque[LogEntry] = deque(maxlen=max(1, max_entries))
        self._lock = threading.Lock()
        self._listeners: list[Callable[[LogEntry], None]] = []

    def add(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.append(entry)
            listeners = list(self._listeners)
        for listener in listeners:
            listener(entry)

    def entries(self) -> list[LogEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def subscribe(self, listener: Callable[[LogEntry], None]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[LogEntry], None]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)


class LogStoreHandler(logging.Handler):
    """Forward INFO+ records into a :class:`LogStore`."""

    def __init__(self, store: LogStore, category: str, level: int = logging.INFO):
        super().__init__(level=level)
        self.store = store
        self.category = category
        self.logger_name: str | None = None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.exc_info and record.exc_info[1] is not None:
                exc = record.exc_info[1]
                message += f" | {type(exc).__name__}: {exc}"
            self.store.add(
                LogEntry(
                    timestamp=datetime.fromtimestamp(record.created),
                    level=record.levelname,
                    category=self.category,
                    message=message,
                )
            )
        except Exception:
            self.handleError(record)


def attach_log_store(store: LogStore, categories: dict[str, str] | None = None) -> list[LogStoreHandler]:
    """Install a :class:`LogStoreHandler` on every tracked logger.

    Handlers sit on the tracked module loggers themselves, so records from
    other modules sharing the package handlers are not captured.
    Returns the installed handlers so callers can detach them again.
    """

    handlers: list[LogStoreHandler] = []
    for logger_name, category in (categories or TRACKED_CATEGORIES).items():
        handler = LogStoreHandler(store, category)
        handler.logger_name = logger_name
        logging.getLogger(logger_name).addHandler(handler)
        handlers.append(handler)
    return handlers


def detach_log_store(handlers: list[LogStoreHandler]) -> None:
    for handler in handlers:
        logging.getLogger(handler.logger_name).removeHandler(handler)
        handler.close()
