"""``personapi db`` subcommands: schema setup, status and migrations."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from rich.console import Console
from rich.table import Table

from personapi.db import operations
from personapi.db.connect import get_db_url
from personapi.logging import get_logger

logger = get_logger(__file__)

# src/personapi/cli/db.py -> repository root
ALEMBIC_DIR = Path(__file__).resolve().parents[3] / "alembic"

_FILE_HELP = "SQLite path or SQLAlchemy URL (default: PERSONAPI_DB_PATH)"


def register_subcommands(subparsers):
    for name, help_text in (
        ("init", "Create the persons schema"),
        ("status", "Report backend, version and number of persons"),
        ("show", "List tables with their row counts and columns"),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument("--file", help=_FILE_HELP)

    for name, default, help_text in (
        ("upgrade", "head", "Apply migrations up to a revision"),
        ("downgrade", "-1", "Revert migrations down to a revision"),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument("revision", nargs="?", default=default)
        subparser.add_argument("--database", help=_FILE_HELP)


def dispatch(args, console: Console | None = None):
    console = console or Console()

    if args.subcommand == "init":
        console.print(f"initialized {operations.initialize(args.file)}")
    elif args.subcommand == "status":
        status = operations.check_status(args.file)
        console.print(
            f"[bold]{status['backend']}[/bold] {status['version'] or 'unknown version'}"
            f" at {status['url']}: {status['persons']} persons",
            soft_wrap=True,
        )
    elif args.subcommand == "show":
        console.print(schema_table(operations.show_tables(args.file)))
    elif args.subcommand in ("upgrade", "downgrade"):
        migrate(args.subcommand, args.revision, args.database)
    else:
        raise ValueError(f"No handler for db subcommand: {args.subcommand}")


def schema_table(tables) -> Table:
    """Render the output of :func:`operations.show_tables` as a rich table."""

    view = Table(title="personapi database", show_lines=True)
    view.add_column("Table", style="bold cyan")
    view.add_column("Rows", justify="right", style="green")
    view.add_column("Columns")

    if not tables:
        view.add_row("[dim]no tables[/dim]", "", "")
    for name, info in sorted(tables.items()):
        columns = "\n".join(
            f"{c['name']} {c['type']}" + ("" if c.get("nullable", True) else " NOT NULL")
            for c in info["columns"]
        )
        view.add_row(name, str(info["rows"]), columns)
    return view


def alembic_config(database: str | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    # '%' is alembic's interpolation character
    config.set_main_option("sqlalchemy.url", get_db_url(database).replace("%", "%%"))
    return config


def migrate(action: str, revision: str, database: str | None = None) -> None:
    config = alembic_config(database)
    logger.info("alembic %s to %s on %s", action, revision, config.get_main_option("sqlalchemy.url"))
    if action == "upgrade":
        command.upgrade(config, revision)
    else:
        command.downgrade(config, revision)
