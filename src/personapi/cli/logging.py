"""``personapi logging`` subcommands."""

import logging

from personapi.logging import get_configured_level, get_logger, log_file_path, reset_logger
from personapi.logging.config import save_log_level


def register_subcommands(subparsers):
    set_level_parser = subparsers.add_parser(
        "set-level", help="Set the logging level"
    )
    set_level_parser.add_argument(
        "level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level to use",
    )

    subparsers.add_parser("show-path", help="Show the log file location")
    subparsers.add_parser(
        "show-level", help="Show the configured logging level"
    )


def dispatch(args):
    """Execute the logging command associated with ``args.subcommand``."""

    if args.subcommand == "set-level":
        level_name = args.level.upper()
        path = save_log_level(level_name)
        reset_logger()
        get_logger(level=getattr(logging, level_name)).info(
            "log level set to %s (saved in %s)", level_name, path
        )
    elif args.subcommand == "show-path":
        print(log_file_path().resolve())
    elif args.subcommand == "show-level":
        print(get_configured_level())
    else:
        get_logger(__file__).error("No handler for subcommand: %s", args.subcommand)
