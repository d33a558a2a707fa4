"""Repository: an EntityStore view bound to one entity type.

Usage:
    books = store.bind(EntityType.of(Book))
    await books.store(Book(id=books.next_id(), title="Dune"))
    everything = await books.get_all()
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from kvstack.core.identity import EntityType

if TYPE_CHECKING:
    from kvstack.storage.store import EntityStore


T = TypeVar("T")


class Repository(Generic[T]):
    """Typed CRUD for a single entity type. Delegates to EntityStore."""

    def __init__(self, store: EntityStore, entity_type: EntityType[T]) -> None:
        self._store = store
        self._entity_type = entity_type

    @property
    def entity_type(self) -> EntityType[T]:
        return self._entity_type

    @property
    def entity_store(self) -> EntityStore:
        return self._store

    def next_id(self) -> int:
        return self._store.next_id(self._entity_type)

    async def store(self, entity: T, id: Any = None) -> T:
        return await self._store.store(self._entity_type, entity, id)

    async def store_all(self, entities: Iterable[T] | Mapping[Any, T]) -> int:
        return await self._store.store_all(self._entity_type, entities)

    async def get(self, id: Any) -> T | None:
        return await self._store.get(self._entity_type, id)

    async def get_all(self) -> list[T | None]:
        return await self._store.get_all(self._entity_type)

    async def delete(self, id: Any) -> bool:
        return await self._store.delete(self._entity_type, id)

    async def delete_all(self, ids: Iterable[Any] | None = None) -> int:
        return await self._store.delete_all(self._entity_type, ids)
