from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from typing import Any

from entitychat.logging import get_logger

from .discovery import DEFAULT_NAMESPACE, discover, registry_universe
from .metadata import SchemaGraph
from .render import generate_system_prompt


logger = get_logger(__name__)


class SchemaDiscoveryService:
    """Lazily discovers and caches the schema graph for the process lifetime.

    The first access runs discovery under a lock; later accesses read the
    cached graph without locking. There is no invalidation: build a new
    service to see a different universe.
    """

    def __init__(
        self,
        universe: Callable[[], Iterable[type]],
        *,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self._universe = universe
        self._namespace = namespace
        self._lock = threading.Lock()
        self._schema: SchemaGraph | None = None

    @classmethod
    def for_base(cls, base: Any, **kwargs: Any) -> "SchemaDiscoveryService":
        return cls(lambda: registry_universe(base), **kwargs)

    @property
    def schema(self) -> SchemaGraph:
        schema = self._schema
        if schema is not None:
            return schema
        with self._lock:
            if self._schema is None:
                logger.info("Running schema discovery")
                self._schema = discover(self._universe(), namespace=self._namespace)
            return self._schema

    def generate_system_prompt(self) -> str:
        return generate_system_prompt(self.schema)


_SERVICE: SchemaDiscoveryService | None = None
_SERVICE_LOCK = threading.Lock()


def get_schema_service() -> SchemaDiscoveryService:
    """Process-wide service bound to the application's declarative ``Base``."""

    global _SERVICE
    if _SERVICE is None:
        with _SERVICE_LOCK:
            if _SERVICE is None:
                # models import the markers from this package
                from entitychat.db.models import Base

                _SERVICE = SchemaDiscoveryService.for_base(Base)
    return _SERVICE
