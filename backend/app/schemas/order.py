"""Order Schemas - checkout and admin order models.

Invariants:
    - OrderCreate.customer.name: stripped, non-empty
    - OrderCreate.items: at least one, each quantity >= 1
    - declared_total is accepted for compatibility and never used for pricing
    - status values come from OrderStatus
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import DAILY_ORDER_LIMIT, OrderStatus


class CustomerInfo(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str | None = Field(None, max_length=320)
    address: str | None = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("customer name cannot be empty or whitespace")
        return v


class OrderItemRequest(BaseModel):
    product_id: UUID
    quantity: int = Field(ge=1)


class OrderCreate(BaseModel):
    """Checkout request from the cart page."""
    model_config = ConfigDict(populate_by_name=True)

    customer: CustomerInfo
    items: list[OrderItemRequest] = Field(min_length=1)
    declared_total: float | None = Field(None, alias="total")


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    product_id: UUID
    quantity: int
    unit_price: float
    product: dict


class CustomerResponse(BaseModel):
    name: str
    email: str | None = None
    address: str | None = None


class OrderResponse(BaseModel):
    id: UUID
    customer: CustomerResponse
    items: list[OrderItemResponse]
    status: OrderStatus
    total: int
    currency_totals: dict[str, int] = {}
    stock_restored: bool = False
    created_at: datetime


class DailyLimitResponse(BaseModel):
    customer: str
    reached: bool
    limit: int = DAILY_ORDER_LIMIT
