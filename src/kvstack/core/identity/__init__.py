"""Entity identity: type descriptors and key derivation."""

from kvstack.core.identity.keys import (
    EntityKeys,
    counter_key,
    index_key,
    primary_key,
    type_name,
)
from kvstack.core.identity.models import (
    EntityType,
    FieldAccessor,
    TypeRegistry,
    normalize_type_name,
)

__all__ = [
    "EntityType",
    "FieldAccessor",
    "TypeRegistry",
    "normalize_type_name",
    "EntityKeys",
    "primary_key",
    "index_key",
    "counter_key",
    "type_name",
]
