"""Tests for logging utilities."""

import logging

from entitychat.logging import get_configured_level, get_logger, reset_logger


def test_reset_logger_allows_reconfiguration(tmp_path):
    log1 = tmp_path / "first.log"
    log2 = tmp_path / "second.log"

    # Initial configuration writes to the first file
    logger = get_logger("test", log_file=log1, console=False)
    logger.info("first message")
    for handler in logger.handlers:
        handler.flush()

    assert "first message" in log1.read_text()

    # Reset and ensure logger has no handlers
    reset_logger("test")
    assert logging.getLogger("test").handlers == []

    # Reconfigure to write to the second file
    logger2 = get_logger("test", log_file=log2, console=False)
    logger2.info("second message")
    for handler in logger2.handlers:
        handler.flush()

    assert "second message" in log2.read_text()
    assert "second message" not in log1.read_text()
    reset_logger("test")


def test_get_logger_configures_once(tmp_path):
    logger = get_logger("test.once", log_file=tmp_path / "once.log", console=False)
    again = get_logger("test.once", log_file=tmp_path / "other.log", console=True)

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.propagate is False
    reset_logger("test.once")


def test_persisted_level_is_used_by_default(tmp_path, monkeypatch):
    config = tmp_path / "logging.json"
    config.write_text('{"log_level": "WARNING"}')
    monkeypatch.setenv("ENTITYCHAT_LOG_CONFIG", str(config))

    get_logger("test.level", log_file=tmp_path / "level.log", console=False)

    assert get_configured_level("test.level") == "WARNING"
    reset_logger("test.level")


def test_package_module_loggers_share_package_handlers(tmp_path):
    reset_logger("entitychat")
    try:
        child = get_logger("entitychat.assistant.tools", log_file=tmp_path / "pkg.log", console=False)
        sibling = get_logger("entitychat.schema.discovery")
        package = logging.getLogger("entitychat")

        assert child.handlers == [] and sibling.handlers == []
        assert child.propagate is True
        assert len(package.handlers) == 1

        child.info("from tools")
        sibling.warning("from discovery")
        for handler in package.handlers:
            handler.flush()

        text = (tmp_path / "pkg.log").read_text()
        assert "[entitychat.assistant.tools] from tools" in text
        assert "[entitychat.schema.discovery] from discovery" in text
    finally:
        reset_logger("entitychat")
