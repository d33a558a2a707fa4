"""Property tests for store/get round trips.

Critical Invariants:
- Store then get yields a deep-equal entity for any field values
- Holds for stdlib dataclasses (no pydantic config) and pydantic models
"""

import asyncio
from dataclasses import dataclass

from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import BaseModel, ConfigDict

from kvstack import EntityStore, EntityType, MemoryBackend

int64 = st.integers(min_value=-(2**63), max_value=2**63 - 1)
int_maps = st.dictionaries(st.text(max_size=10), int64, max_size=5)


@dataclass
class Blob:
    id: str
    name: str
    data: dict[str, int]
    binary: bytes


class Record(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    id: int
    name: str
    data: dict[str, int] | None = None
    binary: bytes | None = None


def _store_then_get(entity_type, entity, id):
    """Run store followed by get on a fresh in-memory store."""

    async def run():
        store = EntityStore(MemoryBackend())
        await store.store(entity_type, entity)
        return await store.get(entity_type, id)

    return asyncio.run(run())


@settings(max_examples=50, deadline=None)
@given(
    id=st.text(min_size=1, max_size=12),
    name=st.text(max_size=20),
    data=int_maps,
    binary=st.binary(max_size=64),
)
def test_dataclass_round_trip(id, name, data, binary):
    original = Blob(id=id, name=name, data=data, binary=binary)

    assert _store_then_get(EntityType.of(Blob), original, id) == original


@settings(max_examples=50, deadline=None)
@given(
    id=st.integers(min_value=0, max_value=2**63 - 1),
    name=st.text(max_size=20),
    data=st.none() | int_maps,
    binary=st.none() | st.binary(max_size=64),
)
def test_pydantic_model_round_trip(id, name, data, binary):
    original = Record(id=id, name=name, data=data, binary=binary)

    restored = _store_then_get(EntityType.of(Record), original, id)

    assert restored == original
    assert restored is not original
