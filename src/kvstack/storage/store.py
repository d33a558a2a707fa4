"""Entity store: typed CRUD over a key-value backend.

Each entity lives at "urn:<type>:<id>" and its identifier is tracked in the
set "ids:<type>". Writes and deletes touch both keys with two commands
issued concurrently; the call resolves once both have finished.

The two commands are not atomic with respect to each other. If one fails,
or two callers race on the same identifier, the record and the index can
drift apart. The store does not hide this: see kvstack.storage.reconcile
for detecting and pruning orphaned index entries.

Usage:
    store = EntityStore(MemoryBackend())
    books = EntityType.of(Book)

    book = Book(id=store.next_id(books), title="Dune")
    await store.store(books, book)
    await store.get(books, book.id)
    await store.delete_all(books)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar, cast

from kvstack.backend.protocol import KeyValueBackend
from kvstack.codec import Codec, JsonCodec
from kvstack.core.errors import DeserializationError
from kvstack.core.identity import EntityKeys, EntityType
from kvstack.core.identity.keys import TypeRef
from kvstack.storage.allocator import IdAllocator

if TYPE_CHECKING:
    from kvstack.storage.repository import Repository

logger = logging.getLogger(__name__)

T = TypeVar("T")
A = TypeVar("A")
B = TypeVar("B")


def _id_order(member: str) -> tuple[int, int, str]:
    """Sort numeric identifiers numerically, then everything else lexically."""
    digits = member[1:] if member.startswith("-") else member
    if digits.isascii() and digits.isdigit():
        return (0, int(member), member)
    return (1, 0, member)


async def _both(
    operation: str, type_name: str, record: Awaitable[A], index: Awaitable[B]
) -> tuple[A, B]:
    """Run the record command and the index command concurrently.

    Waits for both to finish even if one fails, then raises the first error.
    """
    results = await asyncio.gather(record, index, return_exceptions=True)
    errors = [r for r in results if isinstance(r, BaseException)]
    if errors:
        if len(errors) == 1:
            half = "index" if isinstance(results[0], BaseException) else "record"
            logger.warning(
                "%s for '%s' only updated the %s; record and index may have drifted",
                operation,
                type_name,
                half,
            )
        raise errors[0]
    return cast(A, results[0]), cast(B, results[1])


class EntityStore:
    """Stateless CRUD engine for typed entities.

    All operations except next_id are coroutines. The store holds no mutable
    state, so one instance can serve any number of concurrent tasks as long
    as the backend supports concurrent commands.

    Args:
        backend: Key-value backend (bound to one logical database).
        codec: Entity serializer (default JsonCodec).
    """

    def __init__(self, backend: KeyValueBackend, codec: Codec | None = None):
        self._backend = backend
        self._codec: Codec = codec if codec is not None else JsonCodec()
        self._allocator = IdAllocator(backend)

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def codec(self) -> Codec:
        return self._codec

    def next_id(self, entity_type: TypeRef) -> int:
        """Allocate the next identifier for a type. Blocks until allocated."""
        return self._allocator.next_id(entity_type)

    def bind(self, entity_type: EntityType[T]) -> Repository[T]:
        """Get a repository view fixed to one entity type."""
        from kvstack.storage.repository import Repository

        return Repository(self, entity_type)

    def _decode(self, entity_type: EntityType[T], key: str, data: bytes) -> T:
        try:
            return self._codec.decode(data, entity_type.model)
        except DeserializationError as e:
            if e.key is not None:
                raise
            raise DeserializationError(str(e), key=key) from e

    async def store(self, entity_type: EntityType[T], entity: T, id: Any = None) -> T:
        """Store an entity, overwriting any previous record with the same id.

        Args:
            entity_type: Descriptor for the entity's type.
            entity: Entity to store.
            id: Explicit identifier. Defaults to entity_type.id_of(entity).

        Returns:
            The same entity instance.

        Raises:
            MissingIdentifierError: If no id is given and the entity has none.
            EncodingError: If the codec cannot serialize the entity. Nothing
                is written in that case.
        """
        member = entity_type.identifier(entity) if id is None else str(id)
        keys = EntityKeys.for_type(entity_type)
        payload = self._codec.encode(entity)
        await _both(
            "store",
            keys.type_name,
            self._backend.set(keys.primary(member), payload),
            self._backend.sadd(keys.index, member),
        )
        logger.debug("Stored %s", keys.primary(member))
        return entity

    async def store_all(
        self, entity_type: EntityType[T], entities: Iterable[T] | Mapping[Any, T]
    ) -> int:
        """Store many entities with one MSET and one SADD.

        Args:
            entity_type: Descriptor for the entities' type.
            entities: Entities (ids read via the descriptor) or an
                id -> entity mapping.

        Returns:
            How many identifiers were new to the index. Existing records are
            overwritten but not counted. The count reflects the index only,
            so a record whose id was missing from the index counts as new.

        Raises:
            MissingIdentifierError: If an entity has no identifier.
            EncodingError: If any entity cannot be serialized. Nothing is
                written in that case.
        """
        if isinstance(entities, Mapping):
            items = {str(i): e for i, e in entities.items()}
        else:
            items = {entity_type.identifier(e): e for e in entities}
        if not items:
            return 0

        keys = EntityKeys.for_type(entity_type)
        payloads = {keys.primary(i): self._codec.encode(e) for i, e in items.items()}
        _, added = await _both(
            "store_all",
            keys.type_name,
            self._backend.mset(payloads),
            self._backend.sadd(keys.index, *items),
        )
        logger.debug("Stored %d %s entities (%d new)", len(items), keys.type_name, added)
        return added

    async def get(self, entity_type: EntityType[T], id: Any) -> T | None:
        """Fetch one entity, or None if no record exists.

        Raises:
            DeserializationError: If the stored payload cannot be decoded.
        """
        key = EntityKeys.for_type(entity_type).primary(id)
        data = await self._backend.get(key)
        if data is None:
            return None
        return self._decode(entity_type, key, data)

    async def get_raw(self, entity_type: TypeRef, id: Any) -> bytes | None:
        """Fetch the stored payload without decoding it."""
        return await self._backend.get(EntityKeys.for_type(entity_type).primary(id))

    async def get_all(self, entity_type: EntityType[T]) -> list[T | None]:
        """Fetch every entity listed in the type's identifier index.

        The index is unordered. Results are sorted (numeric identifiers
        numerically, then the rest lexically) only so that repeated calls
        agree; callers must not rely on the order.

        An identifier whose record has vanished yields None at its position
        rather than being dropped.

        Raises:
            DeserializationError: If any payload cannot be decoded. One bad
                record fails the whole call.
        """
        keys = EntityKeys.for_type(entity_type)
        members = await self._backend.smembers(keys.index)
        if not members:
            return []

        primary_keys = keys.primaries(sorted(members, key=_id_order))
        payloads = await self._backend.mget(primary_keys)

        entities: list[T | None] = []
        for key, data in zip(primary_keys, payloads, strict=True):
            entities.append(None if data is None else self._decode(entity_type, key, data))

        orphans = sum(1 for data in payloads if data is None)
        if orphans:
            logger.warning("%d orphaned identifier(s) in %s", orphans, keys.index)
        return entities

    async def delete(self, entity_type: TypeRef, id: Any) -> bool:
        """Delete one entity and remove its identifier from the index.

        Returns:
            True if the record existed and was removed. The index removal is
            not reflected in the result.
        """
        keys = EntityKeys.for_type(entity_type)
        member = str(id)
        removed, _ = await _both(
            "delete",
            keys.type_name,
            self._backend.delete(keys.primary(member)),
            self._backend.srem(keys.index, member),
        )
        return removed > 0

    async def delete_all(self, entity_type: TypeRef, ids: Iterable[Any] | None = None) -> int:
        """Delete the given entities, or every indexed entity of the type.

        Args:
            entity_type: Descriptor or type name.
            ids: Identifiers to delete. None means everything in the index.

        Returns:
            How many identifiers were removed from the index.
        """
        keys = EntityKeys.for_type(entity_type)
        if ids is None:
            return await self.delete_all(entity_type, await self._backend.smembers(keys.index))

        members = [str(i) for i in ids]
        if not members:
            return 0

        _, removed = await _both(
            "delete_all",
            keys.type_name,
            self._backend.delete(*keys.primaries(members)),
            self._backend.srem(keys.index, *members),
        )
        logger.debug("Deleted %d %s entities", removed, keys.type_name)
        return removed

    async def aclose(self) -> None:
        """Close the underlying backend."""
        await self._backend.aclose()

    async def __aenter__(self) -> EntityStore:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
