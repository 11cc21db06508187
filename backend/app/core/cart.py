"""Cart - client-side basket math shared by checkout tooling and tests.

Invariants:
    - One line per product; adding an existing product merges quantities
    - Updating a quantity to <= 0 removes the line
    - A cart is not an inventory commitment; stock is only checked at placement
"""

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from app.core.pricing import compute_order_totals, to_decimal


@dataclass
class CartLine:
    product_id: UUID
    name: str
    price: Decimal
    quantity: int
    currencies: list[dict] = field(default_factory=list)


@dataclass
class Cart:
    """Per-browser basket. Pure dataclass, no IO."""

    lines: list[CartLine] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def subtotal(self) -> Decimal:
        return sum(
            (line.price * line.quantity for line in self.lines), Decimal("0"),
        )

    def add(self, product: dict, quantity: int = 1) -> None:
        for line in self.lines:
            if line.product_id == product["id"]:
                line.quantity += quantity
                return
        self.lines.append(CartLine(
            product_id=product["id"],
            name=product["name"],
            price=to_decimal(product["price"]),
            quantity=quantity,
            currencies=list(product.get("currencies") or []),
        ))

    def update_quantity(self, product_id: UUID, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        for line in self.lines:
            if line.product_id == product_id:
                line.quantity = quantity

    def remove(self, product_id: UUID) -> None:
        self.lines = [line for line in self.lines if line.product_id != product_id]

    def clear(self) -> None:
        self.lines.clear()

    def totals(self) -> dict:
        """Rounded totals as the order would be priced at current cart prices."""
        return compute_order_totals([
            {"price": line.price, "quantity": line.quantity, "currencies": line.currencies}
            for line in self.lines
        ])

    def to_order_items(self) -> list[dict]:
        """Request payload items for POST /api/v1/orders."""
        return [
            {"product_id": line.product_id, "quantity": line.quantity}
            for line in self.lines
        ]
