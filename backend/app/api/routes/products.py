"""Product Routes - catalog browsing and admin product management.

Invariants:
    - GET endpoints are served from the catalog cache
    - in_stock cannot be written; it follows stock
    - Stock adjustments that would go negative answer 409
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.schemas.product import (
    ProductCreate, ProductResponse, ProductUpdate, StockAdjustment,
)
from app.services.product_catalog import ProductCatalogService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> ProductCatalogService:
    return ProductCatalogService(db)


@router.get("", response_model=list[ProductResponse])
async def list_products(
    service: ProductCatalogService = Depends(get_catalog_service),
):
    return await service.list_products()


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: UUID,
    service: ProductCatalogService = Depends(get_catalog_service),
):
    return await service.get_product(product_id)


@router.post(
    "", response_model=ProductResponse, status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductCreate,
    service: ProductCatalogService = Depends(get_catalog_service),
):
    """Admin: add a product. in_stock is derived from stock."""
    return await service.add_product(body.model_dump())


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    service: ProductCatalogService = Depends(get_catalog_service),
):
    """Admin: partial update. Only fields sent in the body are applied."""
    return await service.update_product(
        product_id, body.model_dump(exclude_unset=True),
    )


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    service: ProductCatalogService = Depends(get_catalog_service),
):
    await service.delete_product(product_id)


@router.post("/{product_id}/stock", response_model=ProductResponse)
async def adjust_stock(
    product_id: UUID,
    body: StockAdjustment,
    service: ProductCatalogService = Depends(get_catalog_service),
):
    """Admin: restock (positive delta) or write off (negative delta)."""
    return await service.adjust_stock(product_id, body.delta)
