"""OrderItem ORM - one line of an order with the product as it was at order time.

Invariants:
    - Always belongs to an Order (order_id FK)
    - quantity >= 1
    - unit_price and product_snapshot are frozen at placement

Design Decisions:
    - product_id is not a foreign key: products may be deleted from the catalog
      while past orders keep their snapshot
"""

import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, JSON, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class OrderItem(Base):
    """A quantity of one product inside an order."""
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    product_snapshot: Mapped[dict] = mapped_column(JSON, nullable=False)

    order: Mapped["Order"] = relationship("Order", back_populates="items")
