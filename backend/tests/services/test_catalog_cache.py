"""Catalog Cache - read-through mirror behaviour."""

import asyncio
from uuid import uuid4

from app.services.catalog_cache import CatalogCache


def _loader(rows, calls):
    async def load():
        calls.append(1)
        return [dict(r) for r in rows]
    return load


async def test_loads_once_until_invalidated():
    rows = [{"id": uuid4(), "name": "Lollipop", "stock": 5, "currencies": []}]
    calls = []
    cache = CatalogCache()
    load = _loader(rows, calls)

    await cache.get_all(load)
    await cache.get(rows[0]["id"], load)
    assert len(calls) == 1

    cache.invalidate("stock changed")
    assert not cache.is_warm
    await cache.get_all(load)
    assert len(calls) == 2


async def test_returned_copies_do_not_alias_mirror():
    pid = uuid4()
    rows = [{"id": pid, "name": "Lollipop", "stock": 5, "currencies": [{"type": "pencil", "amount": 1}]}]
    cache = CatalogCache()
    load = _loader(rows, [])

    product = await cache.get(pid, load)
    product["stock"] = 0
    product["currencies"].clear()

    fresh = await cache.get(pid, load)
    assert fresh["stock"] == 5
    assert fresh["currencies"] == [{"type": "pencil", "amount": 1}]


async def test_unknown_id_returns_none():
    cache = CatalogCache()
    assert await cache.get(uuid4(), _loader([], [])) is None


async def test_invalidate_during_refill_discards_loaded_rows():
    pid = uuid4()
    cache = CatalogCache()
    started, release = asyncio.Event(), asyncio.Event()

    async def slow_loader():
        started.set()
        await release.wait()
        return [{"id": pid, "name": "Lollipop", "stock": 5, "currencies": []}]

    fresh_calls = []
    fresh_loader = _loader(
        [{"id": pid, "name": "Lollipop", "stock": 0, "currencies": []}], fresh_calls,
    )

    refill = asyncio.create_task(cache.get_all(slow_loader))
    await started.wait()
    cache.invalidate("order placed")
    release.set()
    served = await refill

    assert served[0]["stock"] == 5
    assert not cache.is_warm
    assert (await cache.get(pid, fresh_loader))["stock"] == 0
    assert len(fresh_calls) == 1
