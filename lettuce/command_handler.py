"""RESP request parsing and command dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Optional, Union

from lettuce import handlers
from lettuce.database import Database
from lettuce.handlers import _parse_int

logger = logging.getLogger(__name__)

Handler = Callable[[Sequence[str], Database], str]

_COMMANDS: dict[str, Handler] = {
    "PING": handlers.handle_ping,
    "ECHO": handlers.handle_echo,
    "FLUSHALL": handlers.handle_flush_all,
    "SET": handlers.handle_set,
    "GET": handlers.handle_get,
    "KEYS": handlers.handle_keys,
    "TYPE": handlers.handle_type,
    "DEL": handlers.handle_del,
    "EXPIRE": handlers.handle_expire,
    "RENAME": handlers.handle_rename,
    "LLEN": handlers.handle_llen,
    "LPUSH": handlers.handle_lpush,
    "RPUSH": handlers.handle_rpush,
    "LPOP": handlers.handle_lpop,
    "RPOP": handlers.handle_rpop,
    "LREM": handlers.handle_lrem,
    "LINDEX": handlers.handle_lindex,
    "LSET": handlers.handle_lset,
}


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", "surrogateescape")


def parse_resp_command(data: Union[str, bytes]) -> list[str]:
    """Split a request into tokens.

    A request starting with ``*`` is read as a RESP array of bulk strings;
    parsing stops quietly at the first malformed element. Anything else is
    split on whitespace. Raises ValueError if a count or length is not a number.
    """
    raw = data.encode("utf-8", "surrogateescape") if isinstance(data, str) else bytes(data)
    if not raw:
        return []
    if not raw.startswith(b"*"):
        return [_decode(token) for token in raw.split()]

    crlf = raw.find(b"\r\n", 1)
    if crlf == -1:
        return []
    count = _parse_int(raw[1:crlf].decode("latin-1"))
    pos = crlf + 2

    tokens: list[str] = []
    for _ in range(count):
        if raw[pos:pos + 1] != b"$":
            break
        pos += 1
        crlf = raw.find(b"\r\n", pos)
        if crlf == -1:
            break
        length = _parse_int(raw[pos:crlf].decode("latin-1"))
        pos = crlf + 2
        if length < 0 or pos + length > len(raw):
            break
        tokens.append(_decode(raw[pos:pos + length]))
        pos += length + 2
    return tokens


class CommandHandler:
    """Parses requests and runs them against a database."""

    def __init__(self, database: Optional[Database] = None) -> None:
        self.database = database if database is not None else Database.get_instance()

    def handle_command(self, command_line: Union[str, bytes]) -> str:
        """Run one request and return its RESP reply."""
        tokens = parse_resp_command(command_line)
        if not tokens:
            return "-ERR: empty command\r\n"

        logger.info("Got command: %s", tokens[0])
        handler = _COMMANDS.get(tokens[0].upper())
        if handler is None:
            return "-ERR: Unknown command\r\n"
        return handler(tokens, self.database)