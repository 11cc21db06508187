"""Catalog Cache - in-process read-through mirror of the product catalog.

Invariants:
    - Serves browsing reads only; order placement always reads the authoritative store
    - Any catalog or order mutation calls invalidate(); the next read refetches everything
    - Callers receive deep copies; mutating a returned dict never touches the mirror
    - A refill that overlaps an invalidate() is served once but never stored

Design Decisions:
    - Module-level singleton: single-process uvicorn, same as the DB manager
"""

import copy
import logging
from typing import Awaitable, Callable
from uuid import UUID

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[list[dict]]]


class CatalogCache:
    """Whole-catalog mirror, refetched lazily after invalidation."""

    def __init__(self) -> None:
        self._products: dict[UUID, dict] | None = None
        self._generation = 0

    @property
    def is_warm(self) -> bool:
        return self._products is not None

    async def _ensure_loaded(self, loader: Loader) -> dict[UUID, dict]:
        if self._products is not None:
            return self._products
        generation = self._generation
        rows = await loader()
        products = {row["id"]: row for row in rows}
        if generation == self._generation:
            self._products = products
            logger.debug(f"Catalog cache refilled with {len(rows)} products")
        else:
            logger.debug("Catalog changed during refill; rows served uncached")
        return products

    async def get_all(self, loader: Loader) -> list[dict]:
        products = await self._ensure_loaded(loader)
        return [copy.deepcopy(p) for p in products.values()]

    async def get(self, product_id: UUID, loader: Loader) -> dict | None:
        products = await self._ensure_loaded(loader)
        product = products.get(product_id)
        return copy.deepcopy(product) if product else None

    def invalidate(self, reason: str = "") -> None:
        if self._products is not None:
            logger.debug(f"Catalog cache invalidated: {reason}")
        self._products = None
        self._generation += 1


catalog_cache = CatalogCache()
