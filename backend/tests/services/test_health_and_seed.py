"""Health probes and starter catalog seeding."""

from app.db.seed import STARTER_PRODUCTS, seed_catalog
from app.infrastructure.sql_repositories import SqlProductRepository


async def test_liveness(client):
    res = await client.get("/api/v1/health/")

    assert res.status_code == 200
    assert res.json()["service"] == "candy-shop-api"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")

    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_seed_fills_empty_catalog(test_db):
    assert await seed_catalog(test_db) == len(STARTER_PRODUCTS)

    products = await SqlProductRepository(test_db).get_all()
    assert {p["name"] for p in products} == {p["name"] for p in STARTER_PRODUCTS}
    assert all(p["in_stock"] for p in products)


async def test_seed_is_noop_when_catalog_has_products(test_db, lollipop):
    assert await seed_catalog(test_db) == 0
    assert len(await SqlProductRepository(test_db).get_all()) == 1
