from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from personapi.logging import get_logger

from .base import Base

logger = get_logger(__file__)

# Pool sizing for server databases; SQLite keeps SQLAlchemy's defaults.
POOL_SIZE = 5
POOL_MAX_OVERFLOW = 20
POOL_RECYCLE_SECONDS = 300


def coerce_db_url(raw: str) -> str:
    """Accept either a full SQLAlchemy URL or a bare SQLite file path."""

    raw = str(raw).strip()
    if "://" in raw or raw.startswith("sqlite"):
        return raw
    return "sqlite:///" + raw


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def make_engine(db_url: str = "sqlite:///./personapi.db", *, sql_trace: bool = False) -> Engine:
    db_url = coerce_db_url(db_url)

    if not db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            pool_size=POOL_SIZE,
            max_overflow=POOL_MAX_OVERFLOW,
            pool_recycle=POOL_RECYCLE_SECONDS,
            pool_pre_ping=True,
            echo=sql_trace,
        )

    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        # built-in lower() only folds ASCII, which breaks ilike on Cyrillic names
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
        if sql_trace:
            dbapi_connection.set_trace_callback(lambda x: logger.info(x))
        cursor.close()

    return engine


def initialize_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
