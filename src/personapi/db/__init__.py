from .connect import get_session, get_engine, make_session_factory
from .store import PersonStore

__all__ = ["get_session", "get_engine", "make_session_factory", "PersonStore"]
