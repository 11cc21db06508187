"""Order Placement & Inventory Consistency - the only write path to stock and orders.

Invariants:
    - place_order checks, in order: request shape, daily limit, stock sufficiency;
      the first failure returns a rejected PlacementResult with no side effects
    - On success the order row, every stock decrement and the customer counter
      are committed in one transaction
    - Stock decrements go through the conditional update; a refused decrement
      (another session got there first) rolls everything back
    - Totals are recomputed from catalog prices; the caller's declared total is
      only compared and logged
    - delete_order / cancel_order restore each item's stock exactly once
      (Order.stock_restored), so decrement-then-restore round-trips
    - update_order_status never touches stock and accepts any transition
    - Rejections are returned, not raised; store failures raise DatabaseError

Design Decisions:
    - Clock and shop timezone injected: "today" for the daily limit is the
      calendar date in the shop timezone, and tests can move the clock
    - Counter persisted and maintained incrementally (placement adds, deleting
      one of today's orders releases the slot); rebuild_counters() recomputes
      it from the order log on demand
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time, timezone, tzinfo
from typing import Callable, Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import daily_limit
from app.core.domain_types import (
    CustomerKey, OrderId, OrderStatus, PlacementOutcome, customer_key,
)
from app.core.enforce_order import (
    check_daily_limit, check_stock_sufficiency, validate_order_request,
)
from app.core.errors import (
    DatabaseError, DataIntegrityError, ErrorContext,
    OrderNotCancellableError, ResourceNotFoundError,
)
from app.core.pricing import compute_order_totals, to_decimal
from app.core.repository_protocols import (
    CounterRepository, OrderRepository, ProductRepository,
)
from app.core.stock_rules import aggregate_quantities, find_stock_violation
from app.infrastructure.sql_repositories import (
    SqlCounterRepository, SqlOrderRepository, SqlProductRepository,
)
from app.services.catalog_cache import CatalogCache, catalog_cache

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PlacementResult:
    """Tagged outcome of place_order, consumed by the presentation layer."""
    outcome: PlacementOutcome
    message: str
    order: dict | None = None

    @property
    def placed(self) -> bool:
        return self.outcome == PlacementOutcome.PLACED


def _product_snapshot(product: dict) -> dict:
    """JSON-safe copy of the product as it was when the order was placed."""
    return {
        "id": str(product["id"]),
        "name": product["name"],
        "description": product["description"],
        "price": str(product["price"]),
        "image": product["image"],
        "category": product["category"],
        "currencies": list(product["currencies"]),
    }


class OrderPlacementService:
    """Validates, places, updates and removes orders while keeping stock consistent."""

    def __init__(
        self,
        db: AsyncSession,
        tz: tzinfo = timezone.utc,
        clock: Clock = utc_now,
        cache: CatalogCache = catalog_cache,
    ):
        self.db = db
        self.products: ProductRepository = SqlProductRepository(db)
        self.orders: OrderRepository = SqlOrderRepository(db)
        self.counters: CounterRepository = SqlCounterRepository(db)
        self._tz = tz
        self._clock = clock
        self._cache = cache

    def _today(self):
        return daily_limit.local_date(self._clock(), self._tz)

    # ─── Placement ──────────────────────────────────────────────

    async def place_order(
        self, customer: dict, items: list[dict], declared_total: object = None,
    ) -> PlacementResult:
        """Place an order for `customer` ({name, email?, address?}) and cart `items`."""
        name = (customer.get("name") or "").strip()
        rejection = validate_order_request(name, items)
        if rejection:
            return self._reject(rejection, name)

        key = customer_key(name)
        today = self._today()
        counter = await self.counters.get(key)
        rejection = check_daily_limit(counter, today)
        if rejection:
            return self._reject(rejection, name)

        quantities = aggregate_quantities(items)
        products = await self.products.get_many(list(quantities))
        self._verify_stock_invariants(products.values())
        rejection = check_stock_sufficiency(products, quantities)
        if rejection:
            return self._reject(rejection, name)

        order_items = [
            {
                "product_id": item["product_id"],
                "quantity": item["quantity"],
                "unit_price": products[item["product_id"]]["price"],
                "product": _product_snapshot(products[item["product_id"]]),
                "currencies": products[item["product_id"]]["currencies"],
            }
            for item in items
        ]
        totals = compute_order_totals([
            {"price": i["unit_price"], "quantity": i["quantity"], "currencies": i["currencies"]}
            for i in order_items
        ])
        self._check_declared_total(declared_total, totals["total"], name)

        try:
            for product_id, quantity in quantities.items():
                if not await self.products.update_stock(product_id, -quantity):
                    await self.db.rollback()
                    return self._reject({
                        "outcome": PlacementOutcome.REJECTED_INSUFFICIENT_STOCK,
                        "message": f"Not enough {products[product_id]['name']} in stock.",
                    }, name)
            order = await self.orders.create({
                "customer": {
                    "name": name,
                    "email": customer.get("email"),
                    "address": customer.get("address"),
                },
                "customer_key": key,
                "items": order_items,
                "status": OrderStatus.PENDING.value,
                "total": totals["total"],
                "currency_totals": totals["currency_totals"],
                "created_at": self._clock().astimezone(timezone.utc),
            })
            await self.counters.save(
                key, daily_limit.record_placement(counter, today),
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Failed to persist order for {name}: {e}",
                extra={"customer": name},
            )
            raise DatabaseError("Order could not be saved", "place_order")

        self._cache.invalidate("order placed")
        logger.info(
            f"Order {order['id']} placed by {name} (total {order['total']})",
            extra={
                "order_id": str(order["id"]), "customer": name,
                "outcome": PlacementOutcome.PLACED, "total": order["total"],
            },
        )
        return PlacementResult(
            PlacementOutcome.PLACED,
            f"Order #{str(order['id'])[:8]} has been placed successfully!",
            order,
        )

    def _reject(self, rejection: dict, name: str) -> PlacementResult:
        outcome = rejection["outcome"]
        logger.info(
            f"Order rejected for '{name}': {rejection['message']}",
            extra={
                "customer": name, "outcome": outcome,
                "reason": rejection["message"],
            },
        )
        return PlacementResult(outcome, rejection["message"])

    def _verify_stock_invariants(self, products: Iterable[dict]) -> None:
        for product in products:
            violation = find_stock_violation(product)
            if violation:
                logger.critical(
                    f"Stock invariant violated: {violation}",
                    extra={"product_id": str(product["id"])},
                )
                raise DataIntegrityError(
                    violation, ErrorContext(product_id=str(product["id"])),
                )

    def _check_declared_total(
        self, declared_total: object, total: int, name: str,
    ) -> None:
        if declared_total is None:
            return
        if to_decimal(declared_total) != total:
            logger.warning(
                f"Declared total {declared_total} differs from computed total {total}; "
                "using computed total",
                extra={"customer": name},
            )

    # ─── Lifecycle ──────────────────────────────────────────────

    async def update_order_status(
        self, order_id: OrderId, status: OrderStatus,
    ) -> dict:
        """Set any status on an existing order. Stock is not touched."""
        order = await self.orders.update(order_id, status=status.value)
        if order is None:
            raise ResourceNotFoundError("Order", str(order_id))
        await self._commit("update_order_status")
        logger.info(
            f"Order {order_id} status changed to {status.value}",
            extra={"order_id": str(order_id), "status": status.value},
        )
        return order

    async def cancel_order(self, order_id: OrderId) -> dict:
        """Mark a pending order cancelled and put its items back in stock."""
        order = await self.get_order(order_id)
        if order["status"] != OrderStatus.PENDING.value:
            raise OrderNotCancellableError(
                order["status"], context=ErrorContext(order_id=str(order_id)),
            )
        if order["stock_restored"]:
            raise OrderNotCancellableError(
                order["status"],
                reason="Order stock has already been returned",
                context=ErrorContext(order_id=str(order_id)),
            )
        await self._restore_stock(order)
        updated = await self.orders.update(
            order_id, status=OrderStatus.CANCELLED.value, stock_restored=True,
        )
        await self._commit("cancel_order")
        self._cache.invalidate("order cancelled")
        logger.info(
            f"Order {order_id} cancelled, stock restored",
            extra={"order_id": str(order_id)},
        )
        return updated

    async def delete_order(self, order_id: OrderId) -> dict:
        """Remove an order from the log, restoring stock unless already restored."""
        order = await self.get_order(order_id)
        if not order["stock_restored"]:
            await self._restore_stock(order)
        await self.orders.delete(order_id)
        await self._release_daily_slot(order)
        await self._commit("delete_order")
        self._cache.invalidate("order deleted")
        logger.info(
            f"Order {order_id} deleted",
            extra={"order_id": str(order_id)},
        )
        return order

    async def _release_daily_slot(self, order: dict) -> None:
        key = customer_key(order["customer"]["name"])
        counter = daily_limit.record_removal(
            await self.counters.get(key),
            daily_limit.local_date(order["created_at"], self._tz),
            self._today(),
        )
        if counter is not None:
            await self.counters.save(key, counter)

    async def _restore_stock(self, order: dict) -> None:
        for item in order["items"]:
            restored = await self.products.update_stock(
                item["product_id"], item["quantity"],
            )
            if not restored:
                logger.warning(
                    f"Product {item['product_id']} no longer in catalog; "
                    f"{item['quantity']} unit(s) from order {order['id']} not restocked",
                    extra={
                        "order_id": str(order["id"]),
                        "product_id": str(item["product_id"]),
                    },
                )

    async def _commit(self, operation: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Commit failed during {operation}: {e}")
            raise DatabaseError("Order log could not be updated", operation)

    # ─── Reads ──────────────────────────────────────────────────

    async def get_order(self, order_id: OrderId) -> dict:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundError("Order", str(order_id))
        return order

    async def list_orders(self, customer_name: str | None = None) -> list[dict]:
        key = customer_key(customer_name) if customer_name else None
        return await self.orders.get_all(key)

    async def has_reached_daily_limit(self, customer_name: str) -> bool:
        counter = await self.counters.get(customer_key(customer_name))
        return daily_limit.has_reached_daily_limit(counter, self._today())

    async def rebuild_counters(self) -> dict[CustomerKey, int]:
        """Recompute every customer's counter from today's orders in the log."""
        today = self._today()
        start_of_day = datetime.combine(today, time.min, tzinfo=self._tz)
        placements = await self.orders.placements_since(
            start_of_day.astimezone(timezone.utc),
        )
        counters = daily_limit.rebuild_counters(
            ((name, daily_limit.local_date(ts, self._tz)) for name, ts in placements),
            today,
        )
        await self.counters.replace_all(counters)
        await self._commit("rebuild_counters")
        logger.info(f"Rebuilt daily counters for {len(counters)} customer(s)")
        return {key: counter.count for key, counter in counters.items()}
