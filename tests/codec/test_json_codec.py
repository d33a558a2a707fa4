"""Tests for JsonCodec.

Focus: fidelity for nested and binary fields (the round-trip guarantee the
store depends on) and error reporting for malformed payloads.
"""

import json
from dataclasses import dataclass
from typing_extensions import TypedDict

import pytest
from pydantic import BaseModel

from kvstack import Codec, DeserializationError, EncodingError, JsonCodec, StoreError


@dataclass
class Note:
    id: int
    tags: list[str]
    meta: dict[str, int]
    parent: int | None = None


@dataclass
class Blob:
    id: int
    binary: bytes


class Packet(TypedDict):
    id: str
    body: bytes


class TextOnly(BaseModel):
    id: int
    binary: bytes


def test_satisfies_protocol():
    assert isinstance(JsonCodec(), Codec)


def test_pydantic_model_with_nested_map_and_binary(entity_cls):
    """Binary payloads survive when the model opts into base64 JSON bytes."""
    original = entity_cls(
        id=1, name="One", data={"a": 0, "b": 1}, binary=bytes([0x00, 0xF0, 0x88, 0x12])
    )
    codec = JsonCodec()

    restored = codec.decode(codec.encode(original), entity_cls)

    assert restored == original
    assert restored.binary == b"\x00\xf0\x88\x12"


def test_stdlib_dataclass():
    original = Note(id=2, tags=["a", "b"], meta={"x": 1})
    codec = JsonCodec()

    assert codec.decode(codec.encode(original), Note) == original


def test_plain_mapping():
    codec = JsonCodec()
    data = codec.encode({"id": 3, "name": "three"})

    assert json.loads(data) == {"id": 3, "name": "three"}
    assert codec.decode(data, dict) == {"id": 3, "name": "three"}


def test_encoding_is_compact_json(entity_cls):
    data = JsonCodec().encode(entity_cls(id=1, name="One"))
    assert data == b'{"id":1,"name":"One","data":null,"binary":null}'


def test_malformed_json_raises_deserialization_error(entity_cls):
    with pytest.raises(DeserializationError, match="Entity"):
        JsonCodec().decode(b"{not json", entity_cls)


def test_wrong_shape_raises_deserialization_error():
    with pytest.raises(DeserializationError) as exc_info:
        JsonCodec().decode(b'{"id": "x", "tags": [], "meta": {}}', Note)
    assert exc_info.value.key is None
    assert isinstance(exc_info.value, ValueError)


def test_adapters_are_cached(entity_cls):
    codec = JsonCodec()
    codec.encode(entity_cls(id=1))
    codec.decode(b'{"id": 1}', entity_cls)

    assert list(codec._adapters) == [entity_cls]


def test_stdlib_dataclass_binary_needs_no_opt_in():
    """CRITICAL: non-UTF-8 bytes survive on a model with no pydantic config.

    Why: entities are arbitrary user types; most will not declare base64.
    """
    original = Blob(id=1, binary=bytes([0x00, 0xF0, 0x88, 0x12]))
    codec = JsonCodec()

    data = codec.encode(original)

    assert json.loads(data)["id"] == 1
    assert codec.decode(data, Blob) == original


def test_typed_dict_binary_round_trip():
    original: Packet = {"id": "p1", "body": b"\xff\xfe\x00"}
    codec = JsonCodec()

    assert codec.decode(codec.encode(original), Packet) == original


def test_model_own_config_wins_and_unencodable_raises_encoding_error():
    """A BaseModel left on UTF-8 bytes keeps that mode; failures stay in StoreError."""
    with pytest.raises(EncodingError, match="TextOnly") as exc_info:
        JsonCodec().encode(TextOnly(id=1, binary=b"\xf0\x88"))

    assert isinstance(exc_info.value, StoreError)
    assert JsonCodec().encode(TextOnly(id=1, binary=b"ok")) == b'{"id":1,"binary":"ok"}'
