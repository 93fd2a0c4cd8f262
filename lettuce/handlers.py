"""Command handlers that turn tokenised commands into RESP replies."""

from __future__ import annotations

import re
from collections.abc import Sequence

from lettuce.database import Database

OK = "+OK\r\n"
NULL_BULK = "$-1\r\n"

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_INTEGER_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _parse_int(text: str) -> int:
    """Read a leading 32-bit integer from ``text``, ignoring trailing characters.

    Raises ValueError if no digits lead the text or the number is out of range.
    """
    match = _INTEGER_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid integer: {text!r}")
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return number


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8", "surrogateescape"))


def _bulk(value: str | None) -> str:
    if value is None:
        return NULL_BULK
    return f"${_byte_length(value)}\r\n{value}\r\n"


def _integer(number: int) -> str:
    return f":{number}\r\n"


def _error(message: str) -> str:
    return f"-ERR: {message}\r\n"


def handle_ping(tokens: Sequence[str], db: Database) -> str:
    """Reply PONG."""
    return "+PONG\r\n"


def handle_echo(tokens: Sequence[str], db: Database) -> str:
    """Reply with the first argument as a simple string."""
    if len(tokens) < 2:
        return _error("ECHO requires an argument")
    return f"+{tokens[1]}\r\n"


def handle_flush_all(tokens: Sequence[str], db: Database) -> str:
    """Clear every store."""
    db.flush_all()
    return OK


def handle_set(tokens: Sequence[str], db: Database) -> str:
    """Store a string value."""
    if len(tokens) < 3:
        return _error("SET expects 2 arguments - key and value")
    db.set(tokens[1], tokens[2])
    return OK


def handle_get(tokens: Sequence[str], db: Database) -> str:
    """Reply with the string stored under a key, or a null bulk string."""
    if len(tokens) < 2:
        return _error("GET requires a key")
    return _bulk(db.get(tokens[1]))


def handle_keys(tokens: Sequence[str], db: Database) -> str:
    """Reply with an array of every key."""
    all_keys = db.keys()
    return f"*{len(all_keys)}\r\n" + "".join(_bulk(key) for key in all_keys)


def handle_type(tokens: Sequence[str], db: Database) -> str:
    """Reply with the kind of value stored under a key."""
    if len(tokens) < 2:
        return _error("TYPE requires a KEY argument")
    return f"+{db.type(tokens[1])}\r\n"


def handle_del(tokens: Sequence[str], db: Database) -> str:
    """Delete a key; reply 1 if it existed, else 0."""
    if len(tokens) < 2:
        return _error("DEL requires a KEY argument")
    return _integer(int(db.delete(tokens[1])))


def handle_expire(tokens: Sequence[str], db: Database) -> str:
    """Set an expiry on a key; reply 1 if the key exists, else 0.

    Raises ValueError if the time is not an integer.
    """
    if len(tokens) < 3:
        return _error("EXPIRE requires a KEY and TIME in seconds")
    seconds = _parse_int(tokens[2])
    return _integer(int(db.expire(tokens[1], seconds)))


def handle_rename(tokens: Sequence[str], db: Database) -> str:
    """Rename a key; reply 1 if it existed, else 0."""
    if len(tokens) < 3:
        return _error("RENAME requires an OLD KEY VALUE and NEW KEY VALUE")
    return _integer(int(db.rename(tokens[1], tokens[2])))


def handle_llen(tokens: Sequence[str], db: Database) -> str:
    """Reply with the length of a list."""
    if len(tokens) < 2:
        return _error("LLEN requires a KEY")
    return _integer(db.llen(tokens[1]))


def handle_lpush(tokens: Sequence[str], db: Database) -> str:
    """Push a value onto the head of a list; reply with the new length."""
    if len(tokens) < 3:
        return _error("LPUSH requires a KEY and VALUE")
    db.lpush(tokens[1], tokens[2])
    return _integer(db.llen(tokens[1]))


def handle_rpush(tokens: Sequence[str], db: Database) -> str:
    """Append a value to a list; reply with the new length."""
    if len(tokens) < 3:
        return _error("RPUSH requires a KEY and VALUE")
    db.rpush(tokens[1], tokens[2])
    return _integer(db.llen(tokens[1]))


def handle_lpop(tokens: Sequence[str], db: Database) -> str:
    """Pop the head of a list."""
    if len(tokens) < 2:
        return _error("LPOP requires a KEY")
    return _bulk(db.lpop(tokens[1]))


def handle_rpop(tokens: Sequence[str], db: Database) -> str:
    """Pop the tail of a list."""
    if len(tokens) < 2:
        return _error("RPOP requires a KEY")
    return _bulk(db.rpop(tokens[1]))


def handle_lrem(tokens: Sequence[str], db: Database) -> str:
    """Remove occurrences of a value from a list; reply with how many went."""
    if len(tokens) < 4:
        return _error("LREM requires a KEY, COUNT and VALUE")
    try:
        count = _parse_int(tokens[2])
    except ValueError:
        return _error("Invalid count value")
    return _integer(db.lrem(tokens[1], count, tokens[3]))


def handle_lindex(tokens: Sequence[str], db: Database) -> str:
    """Reply with the list element at an index."""
    if len(tokens) < 3:
        return _error("LINDEX requires a KEY and INDEX")
    try:
        index = _parse_int(tokens[2])
    except ValueError:
        return _error("Invalid index value")
    return _bulk(db.lindex(tokens[1], index))


def handle_lset(tokens: Sequence[str], db: Database) -> str:
    """Replace the list element at an index."""
    if len(tokens) < 4:
        return _error("LSET requires a KEY, INDEX and VALUE")
    try:
        index = _parse_int(tokens[2])
    except ValueError:
        return _error("Invalid index value")
    if db.lset(tokens[1], index, tokens[3]):
        return OK
    return _error("Index out of range")