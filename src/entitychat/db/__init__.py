from .connect import get_db_path, make_session_factory, open_session_factory

__all__ = ["get_db_path", "make_session_factory", "open_session_factory"]
