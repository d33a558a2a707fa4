"""Key-value backends.

Usage:
    from kvstack.backend import MemoryBackend, KeyValueBackend

    # Redis (requires a running server)
    from kvstack.backend.redis_backend import RedisBackend
"""

from kvstack.backend.memory import MemoryBackend
from kvstack.backend.protocol import KeyValueBackend
from kvstack.backend.retry import RetryPolicy

__all__ = [
    "KeyValueBackend",
    "MemoryBackend",
    "RetryPolicy",
]
