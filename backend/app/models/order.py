"""Order ORM - one placed order in the order log.

Invariants:
    - Created only by OrderPlacementService.place_order
    - status is one of OrderStatus values; any value may follow any other
    - total and currency_totals are already rounded up to whole units
    - stock_restored flips to True exactly once, when the items go back on the shelf
    - customer_key is the normalized name used for daily-limit lookups

Design Decisions:
    - JSON column for currency_totals: small map of currency type -> int
    - cascade delete for items: an order owns its lines
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, JSON, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Order(Base):
    """Order aggregate root - owns its OrderItems."""
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_key: Mapped[str] = mapped_column(
        String(200), nullable=False, index=True,
    )
    customer_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    customer_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency_totals: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=dict,
    )
    stock_restored: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="order",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="OrderItem.position",
    )
