"""Order Placement Guards - ordered precondition checks run before any write.

Invariants:
    - Each check is PURE: returns a rejection descriptor or None, never mutates
    - Checks run in a fixed order: request shape, daily limit, stock sufficiency
    - The first failing check aborts the placement; no partial orders exist
    - Stock is checked against the authoritative store snapshot passed in,
      with quantities for the same product summed

Design Decisions:
    - Descriptors carry a PlacementOutcome so callers branch on the tag, not the text
"""

from datetime import date
from uuid import UUID

from app.core.daily_limit import CustomerOrderCount, has_reached_daily_limit
from app.core.domain_types import DAILY_ORDER_LIMIT, PlacementOutcome


def _rejection(outcome: PlacementOutcome, message: str, **extra: object) -> dict:
    return {"status": "rejected", "outcome": outcome, "message": message, **extra}


def validate_order_request(customer_name: str, items: list[dict]) -> dict | None:
    """Rule 0: a customer name and at least one positive-quantity item."""
    if not customer_name.strip():
        return _rejection(
            PlacementOutcome.REJECTED_ERROR,
            "Customer name is required to place an order.",
            field="customer.name",
        )
    if not items:
        return _rejection(
            PlacementOutcome.REJECTED_ERROR,
            "An order needs at least one item.",
            field="items",
        )
    for index, item in enumerate(items):
        if item["quantity"] < 1:
            return _rejection(
                PlacementOutcome.REJECTED_ERROR,
                f"Item #{index + 1} has a non-positive quantity ({item['quantity']}).",
                field=f"items.{index}.quantity",
            )
    return None


def check_daily_limit(
    counter: CustomerOrderCount | None, today: date,
) -> dict | None:
    """Rule 1: at most DAILY_ORDER_LIMIT placements per customer per calendar day."""
    if has_reached_daily_limit(counter, today):
        return _rejection(
            PlacementOutcome.REJECTED_DAILY_LIMIT,
            f"You've reached the limit of {DAILY_ORDER_LIMIT} orders per day.",
        )
    return None


def check_stock_sufficiency(
    products: dict[UUID, dict], quantities: dict[UUID, int],
) -> dict | None:
    """Rule 2: every product exists, is in stock, and covers its summed quantity."""
    for product_id, quantity in quantities.items():
        product = products.get(product_id)
        if product is None:
            return _rejection(
                PlacementOutcome.REJECTED_INSUFFICIENT_STOCK,
                f"Product '{product_id}' is no longer available.",
                product_id=product_id,
            )
        if not product["in_stock"] or product["stock"] < quantity:
            return _rejection(
                PlacementOutcome.REJECTED_INSUFFICIENT_STOCK,
                f"Not enough {product['name']} in stock.",
                product_id=product_id,
                available=product["stock"],
                requested=quantity,
            )
    return None
