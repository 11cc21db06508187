"""Catalog Seed - starter candies inserted into an empty catalog.

Invariants:
    - Seeding is a no-op when any product already exists
    - in_stock is derived from the seeded stock, never listed separately
"""

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.stock_rules import derive_in_stock
from app.models.product import Product

logger = logging.getLogger(__name__)

STARTER_PRODUCTS: list[dict] = [
    {
        "name": "Sugar Sprinkle Delight",
        "description": "Rainbow sprinkles coating a sweet marshmallow center. A classic favorite!",
        "price": Decimal("2.99"),
        "category": "Sweets",
        "stock": 25,
    },
    {
        "name": "Chocolate Dream Bars",
        "description": "Rich chocolate with caramel ribbons. Melt-in-your-mouth goodness.",
        "price": Decimal("3.49"),
        "category": "Chocolate",
        "stock": 25,
    },
    {
        "name": "Fruity Blast Chews",
        "description": "Chewy candies bursting with fruit flavors. Perfect for a tangy treat!",
        "price": Decimal("1.99"),
        "category": "Chewy",
        "stock": 25,
    },
]


async def seed_catalog(db: AsyncSession) -> int:
    """Insert STARTER_PRODUCTS if the catalog is empty. Returns rows inserted."""
    existing = await db.scalar(select(func.count()).select_from(Product))
    if existing:
        return 0
    for data in STARTER_PRODUCTS:
        db.add(Product(**data, in_stock=derive_in_stock(data["stock"])))
    await db.commit()
    logger.info(f"Seeded catalog with {len(STARTER_PRODUCTS)} starter products")
    return len(STARTER_PRODUCTS)
