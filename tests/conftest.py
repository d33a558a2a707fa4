"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from pydantic import BaseModel, ConfigDict

from kvstack import EntityStore, EntityType, MemoryBackend


class Entity(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    id: int | None = None
    name: str = ""
    data: dict[str, int] | None = None
    binary: bytes | None = None


@pytest.fixture
def backend() -> MemoryBackend:
    """Fresh in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> EntityStore:
    """EntityStore over the in-memory backend."""
    return EntityStore(backend)


@pytest.fixture
def entity_cls() -> type[Entity]:
    return Entity


@pytest.fixture
def entities() -> EntityType[Entity]:
    """Descriptor for the test Entity model (namespace "entity")."""
    return EntityType.of(Entity)
