"""kvstack: typed entity persistence over Redis strings and sets.

Usage:
    from pydantic import BaseModel
    from kvstack import EntityStore, EntityType, MemoryBackend

    class Book(BaseModel):
        id: int
        title: str

    books = EntityType.of(Book)
    store = EntityStore(MemoryBackend())

    book = Book(id=store.next_id(books), title="Dune")
    await store.store(books, book)
    assert await store.get(books, book.id) == book

Keys written per type:
    urn:<type>:<id>   serialized entity
    ids:<type>        set of stored identifiers
    id:<type>         identifier counter
"""

__version__ = "0.1.0"

# Backends
from kvstack.backend import (
    KeyValueBackend,
    MemoryBackend,
    RetryPolicy,
)

# Serialization
from kvstack.codec import (
    Codec,
    JsonCodec,
)

# Core primitives
from kvstack.core import (
    ConnectionFailure,
    DeserializationError,
    EncodingError,
    EntityKeys,
    EntityType,
    FieldAccessor,
    MissingIdentifierError,
    StoreError,
    TypeConflictError,
    TypeRegistry,
    counter_key,
    index_key,
    primary_key,
)

# Storage
from kvstack.storage import (
    EntityStore,
    IdAllocator,
    Repository,
    find_orphans,
    prune_orphans,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "EntityType",
    "FieldAccessor",
    "TypeRegistry",
    "EntityKeys",
    "primary_key",
    "index_key",
    "counter_key",
    # Errors
    "StoreError",
    "ConnectionFailure",
    "MissingIdentifierError",
    "DeserializationError",
    "EncodingError",
    "TypeConflictError",
    # Backends
    "KeyValueBackend",
    "MemoryBackend",
    "RetryPolicy",
    # Serialization
    "Codec",
    "JsonCodec",
    # Storage
    "EntityStore",
    "IdAllocator",
    "Repository",
    "find_orphans",
    "prune_orphans",
]
