"""In-memory key/value and list store with simple text persistence."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import ClassVar, Optional, Union

PathLike = Union[str, Path]


class Database:
    """A thread-safe store holding strings, lists and hashes under string keys.

    Expiry deadlines are recorded but not enforced. Values are stored as
    given; the dump format separates fields with whitespace, so values that
    contain whitespace do not survive a dump and load unchanged.
    """

    _instance: ClassVar[Optional["Database"]] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self.key_value_store: dict[str, str] = {}
        self.list_store: dict[str, list[str]] = {}
        self.hash_store: dict[str, dict[str, str]] = {}
        self.expiry_map: dict[str, float] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "Database":
        """Return the process-wide shared database."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    # Persistence

    def dump(self, filename: PathLike) -> None:
        """Write every string, list and hash to ``filename``.

        Raises OSError if the file cannot be written.
        """
        with self._lock:
            lines = [f"K {key} {value}\n" for key, value in self.key_value_store.items()]
            lines.extend(
                "L " + " ".join([key, *items]) + "\n"
                for key, items in self.list_store.items()
            )
            lines.extend(
                "H "
                + " ".join([key, *(f"{field}:{value}" for field, value in fields.items())])
                + "\n"
                for key, fields in self.hash_store.items()
            )
            with open(filename, "w", encoding="utf-8", newline="\n") as stream:
                stream.writelines(lines)

    def load(self, filename: PathLike) -> None:
        """Replace the stores with the contents of a file written by :meth:`dump`.

        Raises OSError (for instance FileNotFoundError) if the file cannot be
        read; the stores are left untouched in that case.
        """
        with self._lock:
            with open(filename, "r", encoding="utf-8", newline="") as stream:
                content = stream.read()

            self.key_value_store.clear()
            self.list_store.clear()
            self.hash_store.clear()

            for line in content.split("\n"):
                tokens = line.split()
                if not tokens:
                    continue
                head = tokens[0]
                kind = head[0]
                rest = ([head[1:]] if len(head) > 1 else []) + tokens[1:]
                if kind == "K":
                    key = rest[0] if rest else ""
                    value = rest[1] if len(rest) > 1 else ""
                    self.key_value_store[key] = value
                elif kind == "L":
                    key = rest[0] if rest else ""
                    self.list_store[key] = rest[1:]
                elif kind == "H":
                    key = rest[0] if rest else ""
                    pairs = rest[1:]
                    if not pairs:
                        continue
                    fields: dict[str, str] = {}
                    for pair in pairs:
                        field, sep, value = pair.partition(":")
                        if sep:
                            fields[field] = value
                    self.hash_store[key] = fields

    def flush_all(self) -> None:
        """Remove every string, list and hash."""
        with self._lock:
            self.key_value_store.clear()
            self.list_store.clear()
            self.hash_store.clear()

    # Key/value operations

    def set(self, key: str, value: str) -> None:
        """Store a string value under ``key``."""
        with self._lock:
            self.key_value_store[key] = value

    def get(self, key: str) -> Optional[str]:
        """Return the string stored under ``key``, or None."""
        with self._lock:
            return self.key_value_store.get(key)

    def keys(self) -> list[str]:
        """Return all keys: strings first, then lists, then hashes."""
        with self._lock:
            return [
                *self.key_value_store,
                *self.list_store,
                *self.hash_store,
            ]

    def type(self, key: str) -> str:
        """Return 'string', 'list', 'hash' or 'none' for ``key``."""
        with self._lock:
            if key in self.key_value_store:
                return "string"
            if key in self.list_store:
                return "list"
            if key in self.hash_store:
                return "hash"
            return "none"

    def delete(self, key: str) -> bool:
        """Remove ``key`` from every store; True if anything was removed."""
        with self._lock:
            removed = False
            for store in (self.key_value_store, self.list_store, self.hash_store):
                if store.pop(key, None) is not None:
                    removed = True
            return removed

    def _exists(self, key: str) -> bool:
        return (
            key in self.key_value_store
            or key in self.list_store
            or key in self.hash_store
        )

    def expire(self, key: str, seconds: int) -> bool:
        """Record a deadline ``seconds`` from now for an existing key."""
        with self._lock:
            if not self._exists(key):
                return False
            self.expiry_map[key] = time.monotonic() + seconds
            return True

    def rename(self, old_key: str, new_key: str) -> bool:
        """Move ``old_key`` to ``new_key`` in every store holding it."""
        with self._lock:
            found = False
            for store in (self.key_value_store, self.list_store, self.hash_store):
                if old_key in store:
                    store[new_key] = store[old_key]
                    del store[old_key]
                    found = True
            if old_key in self.expiry_map:
                self.expiry_map[new_key] = self.expiry_map[old_key]
                del self.expiry_map[old_key]
            return found

    # List operations

    def llen(self, key: str) -> int:
        """Return the length of the list under ``key`` (0 if absent)."""
        with self._lock:
            return len(self.list_store.get(key, ()))

    def lpush(self, key: str, value: str) -> None:
        """Insert ``value`` at the head of the list, creating it if needed."""
        with self._lock:
            self.list_store.setdefault(key, []).insert(0, value)

    def rpush(self, key: str, value: str) -> None:
        """Append ``value`` to the list, creating it if needed."""
        with self._lock:
            self.list_store.setdefault(key, []).append(value)

    def lpop(self, key: str) -> Optional[str]:
        """Remove and return the head of the list, or None if empty or absent."""
        with self._lock:
            items = self.list_store.get(key)
            return items.pop(0) if items else None

    def rpop(self, key: str) -> Optional[str]:
        """Remove and return the tail of the list, or None if empty or absent."""
        with self._lock:
            items = self.list_store.get(key)
            return items.pop() if items else None

    def lrem(self, key: str, count: int, value: str) -> int:
        """Remove occurrences of ``value`` and return how many were removed.

        A count of 0 removes all occurrences; a positive count removes at most
        that many from the head. A negative count removes nothing.
        """
        with self._lock:
            items = self.list_store.get(key)
            if items is None:
                return 0
            if count == 0:
                kept = [item for item in items if item != value]
                removed = len(items) - len(kept)
                items[:] = kept
                return removed
            if count < 0:
                return 0
            removed = 0
            kept = []
            for item in items:
                if item == value and removed < count:
                    removed += 1
                else:
                    kept.append(item)
            items[:] = kept
            return removed

    def _resolve_index(self, items: list[str], index: int) -> Optional[int]:
        if index < 0:
            index += len(items)
        if 0 <= index < len(items):
            return index
        return None

    def lindex(self, key: str, index: int) -> Optional[str]:
        """Return the element at ``index`` (negative counts from the tail), or None."""
        with self._lock:
            items = self.list_store.get(key)
            if items is None:
                return None
            position = self._resolve_index(items, index)
            return None if position is None else items[position]

    def lset(self, key: str, index: int, value: str) -> bool:
        """Replace the element at ``index``; False if the list or index is missing."""
        with self._lock:
            items = self.list_store.get(key)
            if items is None:
                return False
            position = self._resolve_index(items, index)
            if position is None:
                return False
            items[position] = value
            return True