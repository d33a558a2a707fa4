"""Tests for drift detection between records and identifier indexes."""

import logging

import pytest

from kvstack import find_orphans, prune_orphans


@pytest.mark.asyncio
async def test_no_orphans_in_consistent_store(store, entities, entity_cls):
    await store.store_all(entities, [entity_cls(id=1), entity_cls(id=2)])

    assert await find_orphans(store, entities) == set()
    assert await prune_orphans(store, entities) == 0


@pytest.mark.asyncio
async def test_empty_index_has_no_orphans(store, entities):
    assert await find_orphans(store, entities) == set()


@pytest.mark.asyncio
async def test_find_and_prune_orphans(store, backend, entities, entity_cls, caplog):
    await store.store_all(entities, [entity_cls(id=i) for i in (1, 2, 3)])
    await backend.delete("urn:entity:1", "urn:entity:3")

    assert await find_orphans(store, entities) == {"1", "3"}

    with caplog.at_level(logging.INFO, logger="kvstack.storage.reconcile"):
        assert await prune_orphans(store, entities) == 2

    assert "Pruned 2" in caplog.text
    assert await backend.smembers("ids:entity") == {"2"}
    assert await store.get_all(entities) == [entity_cls(id=2)]


@pytest.mark.asyncio
async def test_reconcile_accepts_type_name(store, backend, entities, entity_cls):
    await store.store(entities, entity_cls(id=1))
    await backend.delete("urn:entity:1")

    assert await find_orphans(store, "Entity") == {"1"}
