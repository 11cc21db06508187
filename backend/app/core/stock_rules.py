"""Stock Rules - pure arithmetic for the authoritative stock / derived in_stock pair.

Invariants:
    - stock is a non-negative integer after every mutation
    - in_stock == (stock > 0), recomputed on every mutation, never accepted from callers
    - A delta that would make stock negative is refused, not clamped
"""

from uuid import UUID


def derive_in_stock(stock: int) -> bool:
    return stock > 0


def apply_stock_delta(stock: int, delta: int) -> tuple[int, bool] | None:
    """Return (new_stock, in_stock), or None when the delta would go negative."""
    new_stock = stock + delta
    if new_stock < 0:
        return None
    return new_stock, derive_in_stock(new_stock)


def find_stock_violation(product: dict) -> str | None:
    """Describe a broken stock invariant on a stored product, or None."""
    stock = product["stock"]
    if stock < 0:
        return f"Product '{product['name']}' has negative stock ({stock})"
    if product["in_stock"] != derive_in_stock(stock):
        return (
            f"Product '{product['name']}' has in_stock={product['in_stock']} "
            f"but stock={stock}"
        )
    return None


def aggregate_quantities(items: list[dict]) -> dict[UUID, int]:
    """Sum requested quantities per product, preserving first-seen order."""
    quantities: dict[UUID, int] = {}
    for item in items:
        product_id = item["product_id"]
        quantities[product_id] = quantities.get(product_id, 0) + item["quantity"]
    return quantities
