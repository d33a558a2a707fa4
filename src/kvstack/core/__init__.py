"""Core primitives: errors, entity types and keys."""

from kvstack.core.errors import (
    ConnectionFailure,
    DeserializationError,
    EncodingError,
    MissingIdentifierError,
    StoreError,
    TypeConflictError,
)
from kvstack.core.identity import (
    EntityKeys,
    EntityType,
    FieldAccessor,
    TypeRegistry,
    counter_key,
    index_key,
    primary_key,
)

__all__ = [
    # Errors
    "StoreError",
    "ConnectionFailure",
    "MissingIdentifierError",
    "DeserializationError",
    "EncodingError",
    "TypeConflictError",
    # Identity
    "EntityType",
    "FieldAccessor",
    "TypeRegistry",
    "EntityKeys",
    "primary_key",
    "index_key",
    "counter_key",
]
