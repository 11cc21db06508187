"""SQL Repositories - SQLAlchemy implementations of the core boundary protocols.

Invariants:
    - Repositories never commit; the calling service owns the transaction
    - Reads use populate_existing so stale identity-map rows never mask a newer stock value
    - update_stock is a single conditional UPDATE (stock + delta >= 0) that also
      recomputes in_stock, so concurrent sessions cannot oversell
    - in_stock is never accepted as a field write

Design Decisions:
    - Rows leave this module as plain dicts: core guard clauses stay ORM-free
"""

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.daily_limit import CustomerOrderCount
from app.core.domain_types import CustomerKey, OrderId, ProductId
from app.core.stock_rules import derive_in_stock
from app.models.customer_order_counter import CustomerOrderCounter
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.product import Product
from app.models.review import Review

logger = logging.getLogger(__name__)


# ─── Row -> dict ─────────────────────────────────────────────────

def product_to_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "image": product.image,
        "category": product.category,
        "stock": product.stock,
        "in_stock": product.in_stock,
        "currencies": list(product.currencies or []),
        "created_at": product.created_at,
    }


def order_to_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "customer": {
            "name": order.customer_name,
            "email": order.customer_email,
            "address": order.customer_address,
        },
        "items": [
            {
                "product_id": item.product_id,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "product": item.product_snapshot,
            }
            for item in order.items
        ],
        "status": order.status,
        "total": order.total,
        "currency_totals": dict(order.currency_totals or {}),
        "stock_restored": order.stock_restored,
        "created_at": order.created_at,
    }


def review_to_dict(review: Review) -> dict:
    return {
        "id": review.id,
        "product_id": review.product_id,
        "user_name": review.user_name,
        "rating": review.rating,
        "comment": review.comment,
        "image_url": review.image_url,
        "created_at": review.created_at,
    }


# ─── Products ────────────────────────────────────────────────────

class SqlProductRepository:
    """Product catalog store backed by the products table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, product_id: ProductId) -> Product | None:
        result = await self.db.execute(
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> list[dict]:
        result = await self.db.execute(
            select(Product)
            .order_by(Product.created_at, Product.name)
            .execution_options(populate_existing=True)
        )
        return [product_to_dict(p) for p in result.scalars().all()]

    async def get_by_id(self, product_id: ProductId) -> dict | None:
        product = await self._get_row(product_id)
        return product_to_dict(product) if product else None

    async def get_many(self, product_ids: list[ProductId]) -> dict[ProductId, dict]:
        if not product_ids:
            return {}
        result = await self.db.execute(
            select(Product)
            .where(Product.id.in_(product_ids))
            .execution_options(populate_existing=True)
        )
        return {p.id: product_to_dict(p) for p in result.scalars().all()}

    async def add(self, product_data: dict) -> dict:
        if "in_stock" in product_data:
            raise ValueError("in_stock is derived from stock and cannot be written")
        stock = product_data.get("stock", 0)
        product = Product(**product_data, in_stock=derive_in_stock(stock))
        self.db.add(product)
        await self.db.flush()
        return product_to_dict(product)

    async def update(self, product_id: ProductId, **fields: object) -> dict | None:
        if "in_stock" in fields:
            raise ValueError("in_stock is derived from stock and cannot be written")
        product = await self._get_row(product_id)
        if product is None:
            return None
        for name, value in fields.items():
            setattr(product, name, value)
        if "stock" in fields:
            product.in_stock = derive_in_stock(product.stock)
        await self.db.flush()
        return product_to_dict(product)

    async def delete(self, product_id: ProductId) -> bool:
        product = await self._get_row(product_id)
        if product is None:
            return False
        await self.db.delete(product)
        await self.db.flush()
        return True

    async def update_stock(self, product_id: ProductId, delta: int) -> bool:
        """Apply delta unless it would make stock negative. False if refused or missing."""
        result = await self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .where(Product.stock + delta >= 0)
            .values(
                stock=Product.stock + delta,
                in_stock=(Product.stock + delta) > 0,
            )
            .execution_options(synchronize_session=False)
        )
        applied = result.rowcount == 1
        if not applied:
            logger.info(
                f"Stock update refused for product {product_id} (delta {delta})",
                extra={"product_id": str(product_id), "delta": delta},
            )
        return applied


# ─── Orders ──────────────────────────────────────────────────────

class SqlOrderRepository:
    """Order log backed by the orders and order_items tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, order_id: OrderId) -> Order | None:
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, order_data: dict) -> dict:
        customer = order_data["customer"]
        order = Order(
            customer_name=customer["name"],
            customer_key=order_data["customer_key"],
            customer_email=customer.get("email"),
            customer_address=customer.get("address"),
            status=order_data["status"],
            total=order_data["total"],
            currency_totals=order_data["currency_totals"],
            created_at=order_data["created_at"],
            items=[
                OrderItem(
                    position=position,
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                    product_snapshot=item["product"],
                )
                for position, item in enumerate(order_data["items"])
            ],
        )
        self.db.add(order)
        await self.db.flush()
        return order_to_dict(order)

    async def get_all(self, customer: CustomerKey | None = None) -> list[dict]:
        query = select(Order).order_by(Order.created_at.desc())
        if customer is not None:
            query = query.where(Order.customer_key == customer)
        result = await self.db.execute(
            query.execution_options(populate_existing=True),
        )
        return [order_to_dict(o) for o in result.scalars().all()]

    async def get_by_id(self, order_id: OrderId) -> dict | None:
        order = await self._get_row(order_id)
        return order_to_dict(order) if order else None

    async def update(self, order_id: OrderId, **fields: object) -> dict | None:
        order = await self._get_row(order_id)
        if order is None:
            return None
        for name, value in fields.items():
            setattr(order, name, value)
        await self.db.flush()
        return order_to_dict(order)

    async def delete(self, order_id: OrderId) -> bool:
        order = await self._get_row(order_id)
        if order is None:
            return False
        await self.db.delete(order)
        await self.db.flush()
        return True

    async def placements_since(self, start: datetime) -> list[tuple[str, datetime]]:
        result = await self.db.execute(
            select(Order.customer_name, Order.created_at)
            .where(Order.created_at >= start)
        )
        return [(name, created_at) for name, created_at in result.all()]


# ─── Daily counters ──────────────────────────────────────────────

class SqlCounterRepository:
    """Per-customer daily counters backed by customer_order_counters."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: CustomerKey) -> CustomerOrderCount | None:
        row = await self.db.get(
            CustomerOrderCounter, key, populate_existing=True,
        )
        if row is None:
            return None
        return CustomerOrderCount(
            count=row.count, last_order_date=row.last_order_date,
        )

    async def save(self, key: CustomerKey, counter: CustomerOrderCount) -> None:
        row = await self.db.get(CustomerOrderCounter, key)
        if row is None:
            self.db.add(CustomerOrderCounter(
                customer_key=key,
                count=counter.count,
                last_order_date=counter.last_order_date,
            ))
        else:
            row.count = counter.count
            row.last_order_date = counter.last_order_date
        await self.db.flush()

    async def replace_all(
        self, counters: dict[CustomerKey, CustomerOrderCount],
    ) -> None:
        result = await self.db.execute(
            select(CustomerOrderCounter)
            .execution_options(populate_existing=True)
        )
        existing = {row.customer_key: row for row in result.scalars().all()}
        for key, row in existing.items():
            if key not in counters:
                await self.db.delete(row)
        for key, counter in counters.items():
            row = existing.get(key)
            if row is None:
                self.db.add(CustomerOrderCounter(
                    customer_key=key,
                    count=counter.count,
                    last_order_date=counter.last_order_date,
                ))
            else:
                row.count = counter.count
                row.last_order_date = counter.last_order_date
        await self.db.flush()


# ─── Reviews ─────────────────────────────────────────────────────

class SqlReviewRepository:
    """Product reviews backed by the reviews table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, review_data: dict) -> dict:
        review = Review(**review_data)
        self.db.add(review)
        await self.db.flush()
        return review_to_dict(review)

    async def get_by_product(self, product_id: ProductId) -> list[dict]:
        result = await self.db.execute(
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc())
        )
        return [review_to_dict(r) for r in result.scalars().all()]
