"""Backend protocol for swappable key-value stores.

The store needs string GET/SET (single and batched), INCR, key removal and
unordered string sets. A backend instance is bound to one logical partition
(a Redis database number) at construction.

Usage:
    backend = MemoryBackend()
    store = EntityStore(backend)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueBackend(Protocol):
    """Abstract key-value connection. Implementations handle the actual I/O.

    Async commands must be safe to issue concurrently on one instance.
    """

    def incr(self, key: str) -> int:
        """Atomically increment an integer key, creating it at 1. Blocks."""
        ...

    async def get(self, key: str) -> bytes | None:
        """Get a value, or None if the key is absent."""
        ...

    async def set(self, key: str, value: bytes) -> None:
        """Set a value, overwriting any previous one."""
        ...

    async def mset(self, mapping: Mapping[str, bytes]) -> None:
        """Set many values in one round trip."""
        ...

    async def mget(self, keys: Sequence[str]) -> list[bytes | None]:
        """Get many values in one round trip, None for absent keys."""
        ...

    async def delete(self, *keys: str) -> int:
        """Remove keys. Returns how many existed."""
        ...

    async def sadd(self, key: str, *members: str) -> int:
        """Add members to a set. Returns how many were not already present."""
        ...

    async def srem(self, key: str, *members: str) -> int:
        """Remove members from a set. Returns how many were present."""
        ...

    async def smembers(self, key: str) -> set[str]:
        """All members of a set (empty if the key is absent)."""
        ...

    async def aclose(self) -> None:
        """Release connections."""
        ...
