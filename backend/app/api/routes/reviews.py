"""Review Routes - list and submit product reviews."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.schemas.review import ReviewCreate, ReviewResponse
from app.services.product_reviews import ProductReviewService

router = APIRouter(prefix="/api/v1/products", tags=["reviews"])


def get_review_service(db: AsyncSession = Depends(get_db)) -> ProductReviewService:
    return ProductReviewService(db)


@router.get("/{product_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    product_id: UUID,
    service: ProductReviewService = Depends(get_review_service),
):
    """Reviews for a product, newest first."""
    return await service.list_reviews(product_id)


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_review(
    product_id: UUID,
    body: ReviewCreate,
    service: ProductReviewService = Depends(get_review_service),
):
    return await service.add_review(product_id, body.model_dump())
