"""Codec protocol: reversible entity <-> bytes conversion."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Codec(Protocol):
    """Serializes entities for storage.

    Round-tripping must preserve every field. decode raises
    DeserializationError on malformed input.
    """

    def encode(self, entity: Any) -> bytes:
        """Serialize an entity."""
        ...

    def decode(self, data: bytes, model: type[T]) -> T:
        """Deserialize bytes into an instance of model."""
        ...
