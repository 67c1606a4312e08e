# personapi/db/connect.py

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, ContextManager, Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from personapi.config import get_settings
from personapi.db.models import coerce_db_url, initialize_db, make_engine
from personapi.logging import get_logger

logger = get_logger(__file__)

SessionFactory = Callable[[], ContextManager[Session]]

_ENGINES: dict[str, Engine] = {}


def get_db_url(file: str | Path | None = None) -> str:
    """Return the database URL for ``file`` or the configured default.

    Bare paths are treated as SQLite files and their parent directory is
    created on demand.
    """

    raw = str(file) if file is not None else get_settings().db_path
    db_url = coerce_db_url(raw)
    if db_url.startswith("sqlite:///") and ":memory:" not in db_url:
        Path(db_url[len("sqlite:///"):]).expanduser().parent.mkdir(parents=True, exist_ok=True)
    logger.debug("resolved db url %s", db_url)
    return db_url


def get_engine(file: str | Path | None = None) -> Engine:
    """Return a cached, initialized engine for ``file``."""

    db_url = get_db_url(file)
    engine = _ENGINES.get(db_url)
    if engine is None:
        engine = make_engine(db_url, sql_trace=get_settings().sql_trace)
        initialize_db(engine)
        _ENGINES[db_url] = engine
        logger.info("opened database %s", db_url)
    return engine


def make_session_factory(engine: Engine) -> SessionFactory:
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    initialize_db(engine=engine)

    @contextmanager
    def get_session():
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


# Session Context Manager
@contextmanager
def get_session(file_path: str | Path | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations.

    Parameters
    ----------
    file_path:
        Optional SQLite path or SQLAlchemy URL. Defaults to
        ``PERSONAPI_DB_PATH``.
    """

    factory = make_session_factory(get_engine(file_path))
    with factory() as session:
        yield session
