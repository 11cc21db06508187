"""Daily Order Limit - per-customer counter of placements on the current calendar day.

Invariants:
    - A customer with count >= DAILY_ORDER_LIMIT and last_order_date == today is blocked
    - A new calendar day resets the count (next placement starts at 1)
    - Removing one of today's orders from the log gives the slot back
    - Counters are derived state: rebuild_counters() recomputes them from the order log
    - "today" is always passed in; this module never reads the clock

Design Decisions:
    - Frozen dataclass: record_placement returns a new counter, callers persist it
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable

from app.core.domain_types import CustomerKey, DAILY_ORDER_LIMIT, customer_key


@dataclass(frozen=True)
class CustomerOrderCount:
    """Placements by one customer on last_order_date."""
    count: int
    last_order_date: date


def local_date(timestamp: datetime, tz: tzinfo) -> date:
    """Calendar date of a timestamp in the shop timezone. Naive values are UTC."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(tz).date()


def has_reached_daily_limit(
    counter: CustomerOrderCount | None, today: date,
    limit: int = DAILY_ORDER_LIMIT,
) -> bool:
    if counter is None:
        return False
    return counter.last_order_date == today and counter.count >= limit


def record_placement(
    counter: CustomerOrderCount | None, today: date,
) -> CustomerOrderCount:
    """Counter after one more successful placement today."""
    if counter is None or counter.last_order_date != today:
        return CustomerOrderCount(count=1, last_order_date=today)
    return CustomerOrderCount(count=counter.count + 1, last_order_date=today)


def record_removal(
    counter: CustomerOrderCount | None, order_date: date, today: date,
) -> CustomerOrderCount | None:
    """Counter after one of the customer's orders leaves the log.

    Only an order placed today is still counted, so older removals change nothing.
    Returns None when there is no counter to update.
    """
    if counter is None or order_date != today or counter.last_order_date != today:
        return None
    return CustomerOrderCount(count=max(counter.count - 1, 0), last_order_date=today)


def rebuild_counters(
    orders: Iterable[tuple[str, date]], today: date,
) -> dict[CustomerKey, CustomerOrderCount]:
    """Recompute counters from (customer_name, order_date) pairs. Only today counts."""
    counters: dict[CustomerKey, CustomerOrderCount] = {}
    for name, order_date in orders:
        if order_date != today:
            continue
        key = customer_key(name)
        counters[key] = record_placement(counters.get(key), today)
    return counters
