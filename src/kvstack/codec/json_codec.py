"""JSON codec built on pydantic.

Handles pydantic models, pydantic and stdlib dataclasses, TypedDicts and
plain JSON-able values. Every model is wrapped in a RootModel whose config
stores bytes as base64, so binary fields round-trip without any opt-in.
Types carrying their own pydantic config (BaseModel, pydantic dataclasses)
keep it: a BaseModel left on the default UTF-8 bytes mode cannot encode
non-text bytes and raises EncodingError.

Usage:
    @dataclass
    class Blob:
        id: int
        data: bytes

    codec = JsonCodec()
    payload = codec.encode(Blob(id=1, data=b"\\x00\\xf0"))
    blob = codec.decode(payload, Blob)
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import ConfigDict, RootModel, ValidationError
from pydantic_core import PydanticSerializationError

from kvstack.core.errors import DeserializationError, EncodingError

T = TypeVar("T")


class _Payload(RootModel[T]):
    """Root wrapper that lends base64 bytes handling to types without their own config."""

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")


class JsonCodec:
    """Codec producing compact JSON bytes.

    Payload models are built lazily and cached per model.
    """

    def __init__(self) -> None:
        self._adapters: dict[Any, type[_Payload[Any]]] = {}

    def _adapter(self, model: Any) -> type[_Payload[Any]]:
        adapter = self._adapters.get(model)
        if adapter is None:
            adapter = _Payload[model]  # type: ignore[valid-type]
            self._adapters[model] = adapter
        return adapter

    def encode(self, entity: Any) -> bytes:
        model = type(entity)
        try:
            return self._adapter(model).model_construct(entity).model_dump_json().encode()
        except PydanticSerializationError as e:
            raise EncodingError(f"Cannot encode {model.__qualname__}: {e}") from e

    def decode(self, data: bytes, model: type[T]) -> T:
        try:
            return self._adapter(model).model_validate_json(data).root  # type: ignore[no-any-return]
        except ValidationError as e:
            raise DeserializationError(
                f"Cannot decode {model.__qualname__}: {e.error_count()} validation error(s)"
            ) from e
