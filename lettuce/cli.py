"""Command-line entry point that loads the database and starts the server."""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Union

from lettuce.database import Database
from lettuce.handlers import _parse_int
from lettuce.server import DUMP_FILENAME, LettuceServer

logger = logging.getLogger(__name__)

DEFAULT_PORT = 6379
PERSIST_INTERVAL = 300.0


def _parse_port(args: Sequence[str]) -> int:
    """Return the port given as the first argument, or the default."""
    if args:
        return _parse_int(args[0])
    return DEFAULT_PORT


def _load_database(filename: Union[str, Path]) -> bool:
    """Load the shared database from ``filename``; False if it cannot be read."""
    try:
        Database.get_instance().load(filename)
    except OSError:
        print(f"No {filename} file found")
        return False
    print(f"Database loaded from {filename}")
    return True


def _persist_periodically(
    stop: threading.Event,
    interval: float = PERSIST_INTERVAL,
    filename: Union[str, Path] = DUMP_FILENAME,
) -> None:
    """Dump the shared database every ``interval`` seconds until ``stop`` is set."""
    while not stop.wait(interval):
        try:
            Database.get_instance().dump(filename)
        except OSError as exc:
            logger.error("-ERR: Failed to dump database: %s", exc)
            continue
        logger.info("Database dumped to %s", filename)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the server on the port given as the first argument (default 6379)."""
    args = list(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    port = _parse_port(args)
    _load_database(DUMP_FILENAME)

    server = LettuceServer(port)
    stop = threading.Event()
    persistence = threading.Thread(
        target=_persist_periodically, args=(stop,), daemon=True
    )
    persistence.start()
    try:
        server.run()
    finally:
        stop.set()
    return 0


if __name__ == "__main__":
    sys.exit(main())