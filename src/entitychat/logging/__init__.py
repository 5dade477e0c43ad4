from .logging import get_logger, reset_logger, get_configured_level
from .store import LogEntry, LogStore, LogStoreHandler, attach_log_store, detach_log_store

__all__ = [
    "get_logger",
    "reset_logger",
    "get_configured_level",
    "LogEntry",
    "LogStore",
    "LogStoreHandler",
    "attach_log_store",
    "detach_log_store",
]
