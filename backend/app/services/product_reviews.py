"""Product Reviews - shopper ratings attached to catalog products."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ResourceNotFoundError
from app.core.repository_protocols import ProductRepository, ReviewRepository
from app.infrastructure.sql_repositories import (
    SqlProductRepository, SqlReviewRepository,
)

logger = logging.getLogger(__name__)


class ProductReviewService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.products: ProductRepository = SqlProductRepository(db)
        self.reviews: ReviewRepository = SqlReviewRepository(db)

    async def _require_product(self, product_id: UUID) -> None:
        if await self.products.get_by_id(product_id) is None:
            raise ResourceNotFoundError("Product", str(product_id))

    async def list_reviews(self, product_id: UUID) -> list[dict]:
        await self._require_product(product_id)
        return await self.reviews.get_by_product(product_id)

    async def add_review(self, product_id: UUID, review_data: dict) -> dict:
        await self._require_product(product_id)
        review = await self.reviews.add({**review_data, "product_id": product_id})
        await self.db.commit()
        logger.info(
            f"Review ({review['rating']}/5) added by {review['user_name']}",
            extra={"product_id": str(product_id)},
        )
        return review
