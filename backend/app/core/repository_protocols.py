"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell (infrastructure/sql_repositories.py)
    - ProductRepository.update_stock is the only write path to stock

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the core guard clauses
      that consume their results stay synchronous
"""

from datetime import datetime
from typing import Protocol

from app.core.daily_limit import CustomerOrderCount
from app.core.domain_types import CustomerKey, OrderId, ProductId


class ProductRepository(Protocol):
    """Contract for the product catalog store."""
    async def get_all(self) -> list[dict]: ...
    async def get_by_id(self, product_id: ProductId) -> dict | None: ...
    async def get_many(self, product_ids: list[ProductId]) -> dict[ProductId, dict]: ...
    async def add(self, product_data: dict) -> dict: ...
    async def update(self, product_id: ProductId, **fields: object) -> dict | None: ...
    async def delete(self, product_id: ProductId) -> bool: ...
    async def update_stock(self, product_id: ProductId, delta: int) -> bool: ...


class OrderRepository(Protocol):
    """Contract for the order log."""
    async def create(self, order_data: dict) -> dict: ...
    async def get_all(self, customer: CustomerKey | None = None) -> list[dict]: ...
    async def get_by_id(self, order_id: OrderId) -> dict | None: ...
    async def update(self, order_id: OrderId, **fields: object) -> dict | None: ...
    async def delete(self, order_id: OrderId) -> bool: ...
    async def placements_since(self, start: datetime) -> list[tuple[str, datetime]]: ...


class CounterRepository(Protocol):
    """Contract for persisted per-customer daily counters."""
    async def get(self, key: CustomerKey) -> CustomerOrderCount | None: ...
    async def save(self, key: CustomerKey, counter: CustomerOrderCount) -> None: ...
    async def replace_all(
        self, counters: dict[CustomerKey, CustomerOrderCount],
    ) -> None: ...


class ReviewRepository(Protocol):
    """Contract for product review persistence."""
    async def add(self, review_data: dict) -> dict: ...
    async def get_by_product(self, product_id: ProductId) -> list[dict]: ...
