# entitychat/logging/logging.py
"""Logger setup shared by every entitychat module.

Modules call ``get_logger(__name__)``. Names inside the ``entitychat``
package are children of one package logger that owns the file and console
handlers, so the log file is opened once and a level change applies to the
whole package. Any other name is configured as an independent logger.
"""

import logging
import os
import sys
from pathlib import Path

from .config import load_log_level

PACKAGE_LOGGER = "entitychat"
LOG_FILE_NAME = "entitychat.log"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# names whose handlers were installed by get_logger
_CONFIGURED = set()


def log_dir_path(log_dir=None):
    if log_dir is not None:
        return Path(log_dir)
    return Path(os.environ.get("ENTITYCHAT_LOG_DIR", Path.home() / ".entitychat" / "logs"))


def log_file_path(log_file=None, log_dir=None):
    if log_file is not None:
        return Path(log_file)
    return log_dir_path(log_dir) / LOG_FILE_NAME


def _console_default():
    raw = os.environ.get("ENTITYCHAT_LOG_CONSOLE")
    if raw is None:
        return True
    return raw.strip().lower() not in {"0", "false", "no", "off"}


def _is_package_child(name):
    return name.startswith(PACKAGE_LOGGER + ".")


def get_logger(
    name=PACKAGE_LOGGER,
    level=None,
    log_file=None,
    log_dir=None,
    console=None,
    filemode="a",
    fmt=DEFAULT_FORMAT,
    datefmt=DEFAULT_DATEFMT,
    encoding="utf-8",
    propagate=False,
):
    """Return ``logging.getLogger(name)``, installing handlers on first use.

    - name: logger name; ``entitychat.*`` names configure the package logger
      instead and propagate to it
    - level: default is the persisted level, else ``logging.INFO``
    - log_file / log_dir: default ``$ENTITYCHAT_LOG_DIR/entitychat.log``
    - console: also log to stderr; default from ``ENTITYCHAT_LOG_CONSOLE``
      (on unless set to a false value)
    - propagate: whether a configured logger passes records to the root
    """

    if _is_package_child(name):
        get_logger(
            PACKAGE_LOGGER,
            level=level,
            log_file=log_file,
            log_dir=log_dir,
            console=console,
            filemode=filemode,
            fmt=fmt,
            datefmt=datefmt,
            encoding=encoding,
            propagate=propagate,
        )
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    if name in _CONFIGURED:
        return logger

    file_path = log_file_path(log_file, log_dir)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    logger.setLevel(level if level is not None else (load_log_level() or logging.INFO))
    logger.propagate = propagate

    file_handler = logging.FileHandler(file_path, mode=filemode, encoding=encoding)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console if console is not None else _console_default():
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    _CONFIGURED.add(name)
    return logger


def reset_logger(name=None):
    """Remove the handlers installed by :func:`get_logger`.

    With no ``name`` every configured logger is reset, so the next
    :func:`get_logger` call reads the persisted level again.

    Examples
    --------
    >>> logger = get_logger("demo", level=logging.DEBUG, console=False)
    >>> reset_logger("demo")
    >>> logger = get_logger("demo", level=logging.INFO, console=False)
    """

    if name is not None and _is_package_child(name):
        name = PACKAGE_LOGGER
    names = list(_CONFIGURED) if name is None else [name]

    for logger_name in names:
        logger = logging.getLogger(logger_name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        _CONFIGURED.discard(logger_name)


def get_configured_level(name=PACKAGE_LOGGER):
    """Return the effective level name for ``name``."""

    return logging.getLevelName(logging.getLogger(name).getEffectiveLevel())
