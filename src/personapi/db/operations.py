"""Database maintenance used by the ``personapi db`` commands."""

from typing import Any, TypedDict

from sqlalchemy import func, inspect, select, table, text
from sqlalchemy.engine import Engine

from personapi.db.connect import get_db_url, get_engine, make_session_factory
from personapi.db.store import PersonStore
from personapi.logging import get_logger

logger = get_logger(__file__)


class DbStatus(TypedDict):
    url: str
    backend: str
    version: str | None
    persons: int


class TableInfo(TypedDict):
    rows: int
    columns: list[dict[str, Any]]


def _server_version(engine: Engine) -> str | None:
    if engine.dialect.name == "sqlite":
        with engine.connect() as conn:
            return conn.execute(text("SELECT sqlite_version()")).scalar_one()
    info = engine.dialect.server_version_info
    return ".".join(str(part) for part in info) if info else None


def check_status(file_path: str | None = None) -> DbStatus:
    """Report the backend, its version and how many persons are stored."""

    engine = get_engine(file_path)
    status = DbStatus(
        url=get_db_url(file_path),
        backend=engine.dialect.name,
        version=_server_version(engine),
        persons=PersonStore(make_session_factory(engine)).count(),
    )
    logger.info("db status: %s", status)
    return status


def show_tables(file_path: str | None = None) -> dict[str, TableInfo]:
    """Return every table with its row count and column definitions."""

    engine = get_engine(file_path)
    inspector = inspect(engine)
    tables: dict[str, TableInfo] = {}
    with engine.connect() as conn:
        for name in sorted(inspector.get_table_names()):
            rows = conn.execute(select(func.count()).select_from(table(name))).scalar_one()
            tables[name] = TableInfo(
                rows=int(rows),
                columns=[
                    {
                        "name": column["name"],
                        "type": str(column["type"]),
                        "nullable": column.get("nullable", True),
                    }
                    for column in inspector.get_columns(name)
                ],
            )
    return tables


def initialize(file_path: str | None = None) -> str:
    """Create the schema if it is missing and return the database URL."""

    db_url = get_db_url(file_path)
    get_engine(file_path)
    logger.info("initialized database at %s", db_url)
    return db_url
