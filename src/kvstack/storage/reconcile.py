"""Detection and cleanup of drift between records and identifier indexes.

Records and index entries are written by separate commands, so a failed or
racing write can leave an identifier in "ids:<type>" with no record at
"urn:<type>:<id>". These helpers find and prune such orphans.

Pruning is itself not atomic: an identifier stored between the scan and the
removal loses its index entry. Run it when writers are quiet, or re-store
affected entities afterwards.
"""

from __future__ import annotations

import logging

from kvstack.core.identity import EntityKeys
from kvstack.core.identity.keys import TypeRef
from kvstack.storage.store import EntityStore

logger = logging.getLogger(__name__)


async def find_orphans(store: EntityStore, entity_type: TypeRef) -> set[str]:
    """Identifiers present in the index whose record is missing."""
    keys = EntityKeys.for_type(entity_type)
    members = sorted(await store.backend.smembers(keys.index))
    if not members:
        return set()
    payloads = await store.backend.mget(keys.primaries(members))
    return {m for m, data in zip(members, payloads, strict=True) if data is None}


async def prune_orphans(store: EntityStore, entity_type: TypeRef) -> int:
    """Remove orphaned identifiers from the index.

    Returns:
        How many identifiers were removed.
    """
    orphans = await find_orphans(store, entity_type)
    if not orphans:
        return 0
    keys = EntityKeys.for_type(entity_type)
    removed = await store.backend.srem(keys.index, *sorted(orphans))
    logger.info("Pruned %d orphaned identifier(s) from %s", removed, keys.index)
    return removed
