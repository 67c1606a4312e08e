# personapi/cli/api.py
from personapi.config import get_settings
from personapi.logging import get_logger


def register_subcommands(subparsers):
    subparsers.add_parser("status", help="Check api status")
    starter_parser = subparsers.add_parser("start", help="start the API server")
    starter_parser.add_argument("--host", default=None, help="Host to run the API server on (default: PERSONAPI_HOST)")
    starter_parser.add_argument("--port", type=int, default=None, help="Port to run the API server on (default: PERSONAPI_PORT)")


def dispatch(args):
    """Dispatch API CLI subcommands using a simple lookup table.

    Errors from handlers are allowed to propagate so callers can see the
    underlying exception. Unknown subcommands raise ``ValueError`` with a clear
    message.
    """
    logger = get_logger(__file__)

    def _status() -> None:
        settings = get_settings()
        logger.info(
            "run `personapi api start` to serve on %s:%s (db: %s, enrichment policy: %s)",
            settings.host,
            settings.port,
            settings.db_path,
            settings.enrich_policy,
        )

    def _start() -> None:
        from personapi.api.main import create_app
        import uvicorn

        settings = get_settings()
        host = args.host or settings.host
        port = args.port or settings.port
        logger.info("Starting API server at %s:%s", host, port)
        uvicorn.run(create_app(settings=settings), host=host, port=port)

    commands = {"status": _status, "start": _start}
    try:
        handler = commands[args.subcommand]
    except KeyError as exc:
        message = f"No handler for API subcommand: {args.subcommand}"
        logger.error(message)
        raise ValueError(message) from exc

    handler()
