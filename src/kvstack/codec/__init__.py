"""Entity serialization."""

from kvstack.codec.json_codec import JsonCodec
from kvstack.codec.protocol import Codec

__all__ = [
    "Codec",
    "JsonCodec",
]
