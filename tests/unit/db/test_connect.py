import pytest
from sqlalchemy import select

from entitychat.db import connect
from entitychat.db.models import Category, sqlite_engine


def test_get_db_path_default(tmp_path, monkeypatch):
    monkeypatch.delenv("ENTITYCHAT_DB_PATH", raising=False)
    monkeypatch.setenv("ENTITYCHAT_DB_DIR", str(tmp_path))
    connect.get_db_dir.cache_clear()
    try:
        assert connect.get_db_path() == "sqlite:///" + str(tmp_path / "entitychat.db")
    finally:
        connect.get_db_dir.cache_clear()


def test_get_db_path_custom(tmp_path):
    custom = tmp_path / "custom.db"
    assert connect.get_db_path(custom) == "sqlite:///" + str(custom)
    assert connect.get_db_path("sqlite:///:memory:") == "sqlite:///:memory:"


def test_get_db_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("ENTITYCHAT_DB_PATH", str(tmp_path / "env.db"))
    assert connect.get_db_path() == "sqlite:///" + str(tmp_path / "env.db")


def test_session_factory_commits_on_success(tmp_path):
    factory = connect.make_session_factory(sqlite_engine(f"sqlite:///{tmp_path}/commit.db"))

    with factory() as session:
        session.add(Category(name="Beverages"))

    with factory() as session:
        assert session.scalars(select(Category.name)).all() == ["Beverages"]


def test_session_factory_rolls_back_on_error(tmp_path):
    factory = connect.make_session_factory(sqlite_engine(f"sqlite:///{tmp_path}/rollback.db"))

    with pytest.raises(RuntimeError):
        with factory() as session:
            session.add(Category(name="Beverages"))
            session.flush()
            raise RuntimeError("abort")

    with factory() as session:
        assert session.scalars(select(Category)).all() == []


def test_open_session_factory_creates_tables(tmp_path):
    factory = connect.open_session_factory(tmp_path / "fresh.db")

    with factory() as session:
        assert session.scalars(select(Category)).all() == []
    assert (tmp_path / "fresh.db").exists()
