"""Order Pricing - server-side totals with round-up to whole currency units.

Invariants:
    - Totals are always recomputed from catalog prices, never taken from the caller
    - Primary total = ceil(sum(price * quantity))
    - Each alternate currency = ceil(sum(amount * quantity)), rounded independently
    - Arithmetic is Decimal; floats are converted through str() first
"""

import math
from decimal import Decimal


def to_decimal(value: object) -> Decimal:
    """Convert a price-like value to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_up(amount: Decimal) -> int:
    """Round up to the nearest whole unit (10.30 -> 11, 3.0 -> 3)."""
    return math.ceil(amount)


def round_up_currency_totals(raw: dict[str, Decimal]) -> dict[str, int]:
    return {currency: round_up(to_decimal(amount)) for currency, amount in raw.items()}


def compute_order_totals(lines: list[dict]) -> dict:
    """Compute primary and alternate totals for priced order lines.

    Each line carries `price`, `quantity` and an optional `currencies` list of
    {"type": str, "amount": number}. Pure, no IO.
    """
    subtotal = Decimal("0")
    currency_sums: dict[str, Decimal] = {}
    for line in lines:
        quantity = line["quantity"]
        subtotal += to_decimal(line["price"]) * quantity
        for currency in line.get("currencies") or []:
            amount = to_decimal(currency["amount"]) * quantity
            currency_sums[currency["type"]] = (
                currency_sums.get(currency["type"], Decimal("0")) + amount
            )

    return {
        "subtotal": subtotal,
        "total": round_up(subtotal),
        "currency_totals": round_up_currency_totals(currency_sums),
    }
