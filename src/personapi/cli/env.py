"""Load ``KEY=value`` env files before the CLI reads its settings.

``personapi --env-file .env api start`` exports the file's values into
``os.environ`` so :func:`personapi.config.get_settings` sees them.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
import os


def extract_env_files(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split ``--env-file`` arguments out of ``argv``.

    Both ``--env-file path`` and ``--env-file=path`` are accepted anywhere on
    the command line, so the flag may follow a subcommand.
    """

    env_files: list[str] = []
    remaining: list[str] = []

    idx = 0
    while idx < len(argv):
        token = argv[idx]
        if token == "--env-file":
            if idx + 1 >= len(argv):
                raise SystemExit("--env-file requires a file path")
            env_files.append(argv[idx + 1])
            idx += 2
            continue
        if token.startswith("--env-file="):
            env_files.append(token.split("=", 1)[1])
        else:
            remaining.append(token)
        idx += 1

    return env_files, remaining


def _strip_inline_comment(value: str) -> str:
    quote: str | None = None
    prev = " "
    for idx, ch in enumerate(value):
        if ch in {"'", '"'}:
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        elif ch == "#" and quote is None and prev.isspace():
            return value[:idx].rstrip()
        prev = ch
    return value.rstrip()


def parse_env_file_text(text: str) -> dict[str, str]:
    """Parse env-style lines into a dict; blank lines and comments are skipped."""

    parsed: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, raw_value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue

        value = raw_value.strip()
        if len(value) >= 2 and value[0] in {"'", '"'} and value[-1] == value[0]:
            value = value[1:-1]
        else:
            value = _strip_inline_comment(value)
        parsed[key] = value
    return parsed


def load_env_files(paths: Iterable[str | Path], *, override: bool = True) -> dict[str, str]:
    """Export the files into ``os.environ`` in order; later files win."""

    merged: dict[str, str] = {}
    for path in paths:
        resolved = Path(path).expanduser()
        if not resolved.exists():
            raise SystemExit(f"--env-file does not exist: {resolved}")
        merged.update(parse_env_file_text(resolved.read_text(encoding="utf-8")))

    for key, value in merged.items():
        if override or key not in os.environ:
            os.environ[key] = value
    return merged
