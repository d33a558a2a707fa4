"""Local in-memory backend.

Dict-based stand-in for Redis, suitable for single-process use and testing.
Follows Redis semantics for the commands the store uses: INCR creates keys
at 1, SREM drops emptied sets, MGET yields None for absent or non-string
keys.

Usage:
    backend = MemoryBackend()
    other_db = backend.select(1)  # same server, separate partition
"""

from __future__ import annotations

import copy as cp
import threading
from collections.abc import Mapping, Sequence

_Value = bytes | set[str]


class _Server:
    """Shared state for every partition view of one in-memory server."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.databases: dict[int, dict[str, _Value]] = {}


def _wrong_type(key: str) -> TypeError:
    return TypeError(f"WRONGTYPE Operation against a key holding the wrong kind of value: {key}")


class MemoryBackend:
    """In-memory KeyValueBackend.

    Structure:
        _server.databases[db][key] = bytes | set[str]

    All commands take one process-wide lock, so the synchronous incr is safe
    to call from many threads.

    Args:
        db: Logical partition to operate on (default 0).
    """

    def __init__(self, db: int = 0, *, _server: _Server | None = None):
        self._db = db
        self._server = _server if _server is not None else _Server()

    @property
    def db(self) -> int:
        return self._db

    @property
    def _data(self) -> dict[str, _Value]:
        return self._server.databases.setdefault(self._db, {})

    def select(self, db: int) -> MemoryBackend:
        """Return a view of another partition on the same server."""
        return MemoryBackend(db, _server=self._server)

    def incr(self, key: str) -> int:
        with self._server.lock:
            current = self._data.get(key, b"0")
            if not isinstance(current, bytes):
                raise _wrong_type(key)
            value = int(current) + 1
            self._data[key] = str(value).encode()
            return value

    async def get(self, key: str) -> bytes | None:
        with self._server.lock:
            value = self._data.get(key)
            if value is not None and not isinstance(value, bytes):
                raise _wrong_type(key)
            return value

    async def set(self, key: str, value: bytes) -> None:
        with self._server.lock:
            self._data[key] = bytes(value)

    async def mset(self, mapping: Mapping[str, bytes]) -> None:
        with self._server.lock:
            for key, value in mapping.items():
                self._data[key] = bytes(value)

    async def mget(self, keys: Sequence[str]) -> list[bytes | None]:
        with self._server.lock:
            values = [self._data.get(key) for key in keys]
        return [v if isinstance(v, bytes) else None for v in values]

    async def delete(self, *keys: str) -> int:
        with self._server.lock:
            removed = 0
            for key in keys:
                if self._data.pop(key, None) is not None:
                    removed += 1
            return removed

    async def sadd(self, key: str, *members: str) -> int:
        with self._server.lock:
            current = self._data.get(key)
            if current is None:
                current = set()
            elif not isinstance(current, set):
                raise _wrong_type(key)
            before = len(current)
            current.update(members)
            if current:
                self._data[key] = current
            return len(current) - before

    async def srem(self, key: str, *members: str) -> int:
        with self._server.lock:
            current = self._data.get(key)
            if current is None:
                return 0
            if not isinstance(current, set):
                raise _wrong_type(key)
            present = current.intersection(members)
            current.difference_update(present)
            if not current:
                del self._data[key]
            return len(present)

    async def smembers(self, key: str) -> set[str]:
        with self._server.lock:
            current = self._data.get(key)
            if current is None:
                return set()
            if not isinstance(current, set):
                raise _wrong_type(key)
            return set(current)

    async def aclose(self) -> None:
        """Nothing to release; kept for protocol compatibility."""
        return None

    def dump(self) -> dict[str, bytes | set[str]]:
        """Deep copy of this partition, for inspection in tests and tooling."""
        with self._server.lock:
            return cp.deepcopy(self._data)

    def flush(self) -> None:
        """Drop every key in this partition."""
        with self._server.lock:
            self._data.clear()
