"""Entity storage: allocation, CRUD and reconciliation."""

from kvstack.storage.allocator import IdAllocator
from kvstack.storage.reconcile import find_orphans, prune_orphans
from kvstack.storage.repository import Repository
from kvstack.storage.store import EntityStore

__all__ = [
    "EntityStore",
    "IdAllocator",
    "Repository",
    "find_orphans",
    "prune_orphans",
]
