"""Key derivation for entity records, identifier indexes and counters.

Key formats (the compatibility contract with existing stored data):
    urn:<type>:<id>   serialized entity record
    ids:<type>        set of identifier strings
    id:<type>         integer counter for allocation
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from kvstack.core.identity.models import EntityType, normalize_type_name

TypeRef = EntityType[Any] | str


def type_name(entity_type: TypeRef) -> str:
    """Resolve a descriptor or raw name to its normalized namespace."""
    if isinstance(entity_type, EntityType):
        return entity_type.name
    return normalize_type_name(entity_type)


def primary_key(entity_type: TypeRef, id: Any) -> str:
    return f"urn:{type_name(entity_type)}:{id}"


def index_key(entity_type: TypeRef) -> str:
    return f"ids:{type_name(entity_type)}"


def counter_key(entity_type: TypeRef) -> str:
    return f"id:{type_name(entity_type)}"


@dataclass(frozen=True, slots=True)
class EntityKeys:
    """All keys for one type, computed once per operation."""

    type_name: str
    index: str
    counter: str

    @classmethod
    def for_type(cls, entity_type: TypeRef) -> EntityKeys:
        name = type_name(entity_type)
        return cls(type_name=name, index=index_key(name), counter=counter_key(name))

    def primary(self, id: Any) -> str:
        return primary_key(self.type_name, id)

    def primaries(self, ids: Iterable[Any]) -> list[str]:
        return [self.primary(i) for i in ids]
