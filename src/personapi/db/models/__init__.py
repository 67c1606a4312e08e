from .base import Base, TimestampMixin
from .person import PersonRecord
from .engine import coerce_db_url, make_engine, initialize_db

__all__ = [
    "Base",
    "TimestampMixin",
    "PersonRecord",
    "coerce_db_url",
    "make_engine",
    "initialize_db",
]
