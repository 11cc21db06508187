"""Product Catalog - browsing reads through the cache, admin writes to the store.

Invariants:
    - Reads go through CatalogCache; every write invalidates it after commit
    - in_stock is derived by the repository on every stock write
    - adjust_stock uses the same conditional update as order placement and
      refuses deltas that would make stock negative
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ErrorContext, ResourceNotFoundError, StockAdjustmentError
from app.core.repository_protocols import ProductRepository
from app.infrastructure.sql_repositories import SqlProductRepository
from app.services.catalog_cache import CatalogCache, catalog_cache

logger = logging.getLogger(__name__)


class ProductCatalogService:
    """Catalog reads for shoppers and CRUD for the admin panel."""

    def __init__(self, db: AsyncSession, cache: CatalogCache = catalog_cache):
        self.db = db
        self.products: ProductRepository = SqlProductRepository(db)
        self._cache = cache

    async def list_products(self) -> list[dict]:
        return await self._cache.get_all(self.products.get_all)

    async def get_product(self, product_id: UUID) -> dict:
        product = await self._cache.get(product_id, self.products.get_all)
        if product is None:
            raise ResourceNotFoundError("Product", str(product_id))
        return product

    async def add_product(self, product_data: dict) -> dict:
        product = await self.products.add(product_data)
        await self.db.commit()
        self._cache.invalidate("product added")
        logger.info(
            f"Product '{product['name']}' added with stock {product['stock']}",
            extra={"product_id": str(product["id"])},
        )
        return product

    async def update_product(self, product_id: UUID, fields: dict) -> dict:
        product = await self.products.update(product_id, **fields)
        if product is None:
            raise ResourceNotFoundError("Product", str(product_id))
        await self.db.commit()
        self._cache.invalidate("product updated")
        logger.info(
            f"Product {product_id} updated: {sorted(fields)}",
            extra={"product_id": str(product_id)},
        )
        return product

    async def delete_product(self, product_id: UUID) -> None:
        if not await self.products.delete(product_id):
            raise ResourceNotFoundError("Product", str(product_id))
        await self.db.commit()
        self._cache.invalidate("product deleted")
        logger.info(
            f"Product {product_id} deleted",
            extra={"product_id": str(product_id)},
        )

    async def adjust_stock(self, product_id: UUID, delta: int) -> dict:
        """Apply a manual stock delta (restock or write-off)."""
        if await self.products.get_by_id(product_id) is None:
            raise ResourceNotFoundError("Product", str(product_id))
        if not await self.products.update_stock(product_id, delta):
            await self.db.rollback()
            raise StockAdjustmentError(
                delta, ErrorContext(product_id=str(product_id)),
            )
        await self.db.commit()
        self._cache.invalidate("stock adjusted")
        product = await self.products.get_by_id(product_id)
        logger.info(
            f"Stock of {product_id} adjusted by {delta} to {product['stock']}",
            extra={"product_id": str(product_id), "delta": delta},
        )
        return product
