# entitychat/db/connect.py

import os
from collections.abc import Callable
from contextlib import AbstractContextManager, contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from entitychat.db.models import initialize_db, sqlite_engine
from entitychat.logging import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


@lru_cache(maxsize=None)
def get_db_dir() -> Path:
    db_dir = Path(os.environ.get("ENTITYCHAT_DB_DIR", Path.home() / "entitychat"))
    db_dir.mkdir(parents=True, exist_ok=True)
    logger.info("setting db_dir to %s", str(db_dir))
    return db_dir


def get_db_path(file: str | Path | None = None) -> str:
    """Return a SQLite database URI string.

    Parameters
    ----------
    file:
        Optional path (or ``sqlite`` URI) of the database. When ``None`` the
        ``ENTITYCHAT_DB_PATH`` environment variable is consulted, then the
        default directory from :func:`get_db_dir` with ``entitychat.db``.

    Returns
    -------
    str
        SQLite URI pointing to the database file.
    """

    if file is None:
        file = os.getenv("ENTITYCHAT_DB_PATH") or None
    if file is None:
        db_uri = "sqlite:///" + str(get_db_dir() / "entitychat.db")
    elif str(file).startswith("sqlite"):
        db_uri = str(file)
    else:
        db_uri = "sqlite:///" + str(Path(file))
    logger.info("setting db_path to %s", db_uri)
    return db_uri


def make_session_factory(engine: Engine) -> SessionFactory:
    """Return a context manager factory yielding one transactional session.

    The session commits when the block exits cleanly, rolls back when it
    raises and is always closed. Each assistant tool call opens its own.
    """

    SessionLocal = sessionmaker(bind=engine)
    initialize_db(engine=engine)

    @contextmanager
    def get_session() -> Iterator[Session]:
        session = SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return get_session


def open_session_factory(file_path: str | Path | None = None) -> SessionFactory:
    """Build an engine for ``file_path`` (see :func:`get_db_path`) and wrap it."""

    return make_session_factory(sqlite_engine(get_db_path(file_path)))
