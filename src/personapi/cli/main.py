# personapi/cli/main.py
import argparse
import sys

from personapi.cli import api, db, logging as logging_cli
from personapi.cli.env import extract_env_files, load_env_files


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="personapi", description="personapi CLI toolkit")
    # Parsed out of argv before argparse runs; listed here for --help.
    parser.add_argument(
        "--env-file",
        action="append",
        metavar="PATH",
        help="Load KEY=value pairs into the environment (repeatable)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    db_parser = subparsers.add_parser("db", help="Database operations")
    db_subparsers = db_parser.add_subparsers(dest="subcommand", required=True)
    db.register_subcommands(db_subparsers)

    api_parser = subparsers.add_parser("api", help="api control")
    api_subparsers = api_parser.add_subparsers(dest="subcommand", required=True)
    api.register_subcommands(api_subparsers)

    logging_parser = subparsers.add_parser("logging", help="Logging utilities")
    logging_subparsers = logging_parser.add_subparsers(
        dest="subcommand", required=True
    )
    logging_cli.register_subcommands(logging_subparsers)
    return parser


def main(argv=None):
    env_files, argv = extract_env_files(sys.argv[1:] if argv is None else argv)
    if env_files:
        load_env_files(env_files)

    args = build_parser().parse_args(argv)

    handlers = {"db": db.dispatch, "api": api.dispatch, "logging": logging_cli.dispatch}
    handlers[args.command](args)


if __name__ == "__main__":
    main()
