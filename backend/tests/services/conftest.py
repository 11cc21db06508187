"""Service test fixtures - async DB, frozen clock and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - get_order_service overridden so placements run on the frozen clock
    - The catalog cache singleton is emptied before and after every test

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service
      and route tests (conditional UPDATE and CHECK constraints behave the same)
    - db_manager patched: the readiness probe uses db_manager directly
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi import Depends
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.api.routes.orders import get_order_service
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.models.product import Product
import app.infrastructure.database as db_module
from app.main import app
from app.services.catalog_cache import catalog_cache
from app.services.order_placement import OrderPlacementService


class FrozenClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def empty_catalog_cache():
    catalog_cache.invalidate("test setup")
    yield
    catalog_cache.invalidate("test teardown")


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 14, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def placement(test_db, clock):
    """OrderPlacementService bound to the test session and frozen clock."""
    return OrderPlacementService(test_db, clock=clock)


@pytest.fixture
async def client(test_engine, test_session_factory, clock):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    def override_order_service(db: AsyncSession = Depends(get_db)):
        return OrderPlacementService(db, clock=clock)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_order_service] = override_order_service

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _insert_product(db: AsyncSession, **fields) -> Product:
    data = {
        "name": "Sugar Sprinkle Delight",
        "description": "Rainbow sprinkles",
        "price": Decimal("2.99"),
        "stock": 10,
        "currencies": [],
    }
    data.update(fields)
    data.setdefault("in_stock", data["stock"] > 0)
    product = Product(**data)
    db.add(product)
    await db.commit()
    await db.refresh(product)
    return product


@pytest.fixture
def make_product(test_db):
    """Factory inserting a product row; in_stock follows stock unless overridden."""
    async def _make(**fields) -> Product:
        return await _insert_product(test_db, **fields)
    return _make


@pytest.fixture
async def gummy_bears(make_product):
    return await make_product(
        name="Gummy Bears", price=Decimal("5.15"), stock=10,
        currencies=[
            {"type": "pencil", "amount": 3.6},
            {"type": "crayon", "amount": 1.5},
        ],
    )


@pytest.fixture
async def lollipop(make_product):
    return await make_product(name="Lollipop", price=Decimal("1.00"), stock=5)
