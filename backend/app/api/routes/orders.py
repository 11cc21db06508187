"""Order Routes - checkout, order history and admin order management.

Invariants:
    - Placement rejections map to distinct error codes so the UI can branch:
      DAILY_LIMIT_REACHED (429), INSUFFICIENT_STOCK (409), ORDER_REJECTED (400)
    - Fixed paths (/daily-limit, /counters/rebuild) are registered before /{order_id}
    - DELETE restores stock before removing the order
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.domain_types import PlacementOutcome
from app.core.errors import (
    CandyShopError, DailyLimitReachedError, ErrorContext,
    InsufficientStockError, OrderRejectedError,
)
from app.infrastructure.database import get_db
from app.schemas.order import (
    DailyLimitResponse, OrderCreate, OrderResponse, OrderStatusUpdate,
)
from app.services.order_placement import OrderPlacementService, PlacementResult

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderPlacementService:
    """FastAPI dependency - overridden in tests to pin the clock."""
    return OrderPlacementService(db, tz=get_settings().shop_tz)


def rejection_error(result: PlacementResult, customer: str) -> CandyShopError:
    """Map a rejected PlacementResult to the error the API responds with."""
    context = ErrorContext(customer=customer)
    if result.outcome == PlacementOutcome.REJECTED_DAILY_LIMIT:
        return DailyLimitReachedError(result.message, context)
    if result.outcome == PlacementOutcome.REJECTED_INSUFFICIENT_STOCK:
        return InsufficientStockError(result.message, context)
    return OrderRejectedError(result.message, context)


@router.post(
    "", response_model=OrderResponse, status_code=status.HTTP_201_CREATED,
)
async def place_order(
    body: OrderCreate,
    service: OrderPlacementService = Depends(get_order_service),
):
    """Place an order from the cart."""
    result = await service.place_order(
        body.customer.model_dump(),
        [item.model_dump() for item in body.items],
        body.declared_total,
    )
    if not result.placed:
        raise rejection_error(result, body.customer.name)
    return result.order


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    customer: str | None = Query(None, min_length=1, max_length=200),
    service: OrderPlacementService = Depends(get_order_service),
):
    """List orders, newest first, optionally for one customer name."""
    return await service.list_orders(customer)


@router.get("/daily-limit", response_model=DailyLimitResponse)
async def daily_limit_status(
    customer: str = Query(min_length=1, max_length=200),
    service: OrderPlacementService = Depends(get_order_service),
):
    """Whether the customer can still place an order today."""
    reached = await service.has_reached_daily_limit(customer)
    return DailyLimitResponse(customer=customer.strip(), reached=reached)


@router.post("/counters/rebuild")
async def rebuild_counters(
    service: OrderPlacementService = Depends(get_order_service),
):
    """Admin maintenance: recompute daily counters from today's orders."""
    counters = await service.rebuild_counters()
    return {"customers": counters}


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    service: OrderPlacementService = Depends(get_order_service),
):
    return await service.get_order(order_id)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    service: OrderPlacementService = Depends(get_order_service),
):
    """Admin: set any status. Stock is not affected."""
    return await service.update_order_status(order_id, body.status)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: UUID,
    service: OrderPlacementService = Depends(get_order_service),
):
    """Customer: cancel a pending order and return its items to stock."""
    return await service.cancel_order(order_id)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: UUID,
    service: OrderPlacementService = Depends(get_order_service),
):
    """Admin: remove an order and return its items to stock."""
    await service.delete_order(order_id)
