"""Identifier allocation service.

IdAllocator issues per-type integer identifiers from a counter key in the
backend. It keeps no state of its own, so any number of allocators (in any
number of processes) can share one backend.
"""

from __future__ import annotations

import logging

from kvstack.backend.protocol import KeyValueBackend
from kvstack.core.identity.keys import TypeRef, counter_key

logger = logging.getLogger(__name__)


class IdAllocator:
    """Allocates monotonically increasing identifiers per entity type.

    Each type has its own counter at "id:<type>". The first identifier for a
    type is 1. Allocation blocks: callers need the value right away to build
    the entity they are about to store.

    Args:
        backend: Backend holding the counters.
    """

    def __init__(self, backend: KeyValueBackend):
        self._backend = backend

    def next_id(self, entity_type: TypeRef) -> int:
        """Allocate the next identifier for a type.

        Two calls for the same type never return the same value, even when
        issued concurrently, because the increment is atomic in the backend.

        Args:
            entity_type: Descriptor or type name.

        Returns:
            The newly allocated identifier.

        Raises:
            ConnectionFailure: If the backend is unavailable.
        """
        key = counter_key(entity_type)
        value = self._backend.incr(key)
        logger.debug("Allocated id %d from %s", value, key)
        return value
