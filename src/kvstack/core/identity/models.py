"""Entity type descriptors.

Usage:
    @dataclass
    class Book:
        id: int
        title: str

    books = EntityType.of(Book)                       # name "book", reads Book.id
    legacy = EntityType.of(Book, name="Volume")       # explicit namespace "volume"
    by_isbn = EntityType.of(Book, id_of=lambda b: b.isbn)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from kvstack.core.errors import MissingIdentifierError, TypeConflictError

KEY_SEPARATOR = ":"

T = TypeVar("T")


def normalize_type_name(name: str) -> str:
    """Lower-case and validate a type name for use as a key namespace.

    Raises:
        ValueError: If the name is empty or contains the key separator.
    """
    normalized = name.strip().lower()
    if not normalized:
        raise ValueError("Type name must not be empty")
    if KEY_SEPARATOR in normalized:
        raise ValueError(f"Type name must not contain '{KEY_SEPARATOR}': {name!r}")
    return normalized


@dataclass(frozen=True, slots=True)
class FieldAccessor:
    """Reads an identifier from an attribute, or a key for mapping entities."""

    field: str = "id"

    def __call__(self, entity: Any) -> Any:
        if isinstance(entity, Mapping):
            return entity.get(self.field)
        return getattr(entity, self.field, None)


@dataclass(frozen=True)
class EntityType(Generic[T]):
    """Stable namespace, model class and identifier accessor for one entity kind.

    The name is normalized on construction, so EntityType("Book", Book) and
    EntityType("book", Book) address the same keys.
    """

    name: str
    model: type[T]
    id_of: Callable[[T], Any] = field(default_factory=FieldAccessor)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", normalize_type_name(self.name))

    @classmethod
    def of(
        cls,
        model: type[T],
        name: str | None = None,
        id_field: str = "id",
        id_of: Callable[[T], Any] | None = None,
    ) -> EntityType[T]:
        """Build a descriptor, defaulting the name to the model's class name.

        Args:
            model: Entity class used for decoding.
            name: Explicit namespace. Defaults to model.__name__.
            id_field: Attribute (or mapping key) holding the identifier.
            id_of: Custom accessor; overrides id_field when given.
        """
        return cls(
            name=name if name is not None else model.__name__,
            model=model,
            id_of=id_of if id_of is not None else FieldAccessor(id_field),
        )

    def identifier(self, entity: T) -> str:
        """Return the entity's identifier in its stored string form.

        Raises:
            MissingIdentifierError: If the accessor yields nothing.
        """
        value = self.id_of(entity)
        if value is None:
            raise MissingIdentifierError(self.name, entity)
        return str(value)


class TypeRegistry:
    """Keeps type names unique across models.

    Registering the same model twice returns the existing descriptor;
    registering a different model under a taken name is an error.
    """

    def __init__(self) -> None:
        self._types: dict[str, EntityType[Any]] = {}

    def register(
        self,
        model: type[T],
        name: str | None = None,
        id_field: str = "id",
        id_of: Callable[[T], Any] | None = None,
    ) -> EntityType[T]:
        """Register a model and return its descriptor.

        Raises:
            TypeConflictError: If another model already owns the name.
        """
        entity_type = EntityType.of(model, name=name, id_field=id_field, id_of=id_of)
        existing = self._types.get(entity_type.name)
        if existing is not None:
            if existing.model is not model:
                raise TypeConflictError(
                    f"Type name '{entity_type.name}' is already registered to "
                    f"{existing.model.__qualname__}, cannot reuse it for {model.__qualname__}"
                )
            return existing
        self._types[entity_type.name] = entity_type
        return entity_type

    def get(self, name: str) -> EntityType[Any] | None:
        return self._types.get(normalize_type_name(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_type_name(name) in self._types

    def __iter__(self) -> Iterator[EntityType[Any]]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)
