"""CustomerOrderCounter ORM - cached per-customer placements for the current day.

Invariants:
    - customer_key is the normalized customer name (primary key)
    - Updated in the same transaction as the order it counts
    - Rebuildable from the orders table (OrderPlacementService.rebuild_counters)
"""

from datetime import date

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class CustomerOrderCounter(Base):
    __tablename__ = "customer_order_counters"

    customer_key: Mapped[str] = mapped_column(String(200), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_order_date: Mapped[date] = mapped_column(Date, nullable=False)
