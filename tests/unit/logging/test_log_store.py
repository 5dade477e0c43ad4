import logging
from datetime import datetime

from entitychat.logging import LogEntry, LogStore, attach_log_store, detach_log_store


def _entry(message: str) -> LogEntry:
    return LogEntry(timestamp=datetime(2024, 1, 1), level="INFO", category="Tools", message=message)


def test_store_keeps_newest_entries():
    store = LogStore(max_entries=3)
    for index in range(5):
        store.add(_entry(str(index)))

    assert [entry.message for entry in store.entries()] == ["2", "3", "4"]

    store.clear()
    assert store.entries() == []


def test_store_notifies_listeners():
    store = LogStore()
    seen = []
    store.subscribe(seen.append)
    store.add(_entry("a"))
    store.unsubscribe(seen.append)
    store.add(_entry("b"))

    assert [entry.message for entry in seen] == ["a"]


def test_handler_captures_tracked_loggers_by_category():
    store = LogStore()
    handlers = attach_log_store(store, {"test.store.tools": "Tools"})
    logger = logging.getLogger("test.store.tools")
    logger.setLevel(logging.DEBUG)
    try:
        logger.debug("not captured")
        logger.info("[Tool:query_entity] Called")
        try:
            raise ValueError("bad value")
        except ValueError:
            logger.warning("conversion failed", exc_info=True)
    finally:
        detach_log_store(handlers)

    logger.info("after detach")

    entries = store.entries()
    assert [entry.category for entry in entries] == ["Tools", "Tools"]
    assert entries[0].message == "[Tool:query_entity] Called"
    assert entries[1].level == "WARNING"
    assert entries[1].message == "conversion failed | ValueError: bad value"
