"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - ProductId, OrderId wrap UUIDs
    - CustomerKey is the normalized (trimmed, case-folded) customer name
    - All valid states encoded as Enums, no raw string matching
    - DAILY_ORDER_LIMIT is the single source of truth for the per-day cap

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ProductId = NewType("ProductId", UUID)
OrderId = NewType("OrderId", UUID)

# Free-text customer identity. Two people sharing a name share a key.
CustomerKey = NewType("CustomerKey", str)


# ─── Constants ───────────────────────────────────────────────────

BASE_CURRENCY: str = "pencils"
DAILY_ORDER_LIMIT: int = 2


# ─── Enums ───────────────────────────────────────────────────────

class OrderStatus(str, Enum):
    """Order lifecycle states. No transition table is enforced."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PlacementOutcome(str, Enum):
    """Tagged result of a placement attempt, consumed by the presentation layer."""
    PLACED = "placed"
    REJECTED_DAILY_LIMIT = "rejected_daily_limit"
    REJECTED_INSUFFICIENT_STOCK = "rejected_insufficient_stock"
    REJECTED_ERROR = "rejected_error"


def customer_key(name: str) -> CustomerKey:
    """Normalize a customer name into the key used for rate limiting."""
    return CustomerKey(name.strip().casefold())
