"""Products API - catalog browsing and admin writes.

Invariants:
    - in_stock is always derived from stock, on create, update and adjust
    - Sending in_stock is a validation error
    - Stock adjustments below zero return 409 and change nothing
    - Reads reflect writes immediately (the cache is invalidated)
"""

from uuid import uuid4


def _product_body(**overrides):
    body = {
        "name": "Chocolate Dream Bars",
        "description": "Rich chocolate with caramel ribbons.",
        "price": "3.49",
        "category": "Chocolate",
        "stock": 4,
        "currencies": [{"type": "crayon", "amount": 2}],
    }
    body.update(overrides)
    return body


async def test_create_product_derives_in_stock(client):
    res = await client.post("/api/v1/products", json=_product_body())

    assert res.status_code == 201
    body = res.json()
    assert body["stock"] == 4
    assert body["in_stock"] is True
    assert body["price"] == 3.49
    assert body["image"] == "/placeholder.svg"


async def test_create_product_with_zero_stock_is_out_of_stock(client):
    res = await client.post("/api/v1/products", json=_product_body(stock=0))

    assert res.json()["in_stock"] is False


async def test_create_product_rejects_in_stock_field(client):
    res = await client.post(
        "/api/v1/products", json=_product_body(stock=0, in_stock=True),
    )

    assert res.status_code == 400


async def test_list_products_reflects_new_product(client, lollipop):
    assert len((await client.get("/api/v1/products")).json()) == 1

    await client.post("/api/v1/products", json=_product_body())

    names = {p["name"] for p in (await client.get("/api/v1/products")).json()}
    assert names == {"Lollipop", "Chocolate Dream Bars"}


async def test_get_product(client, lollipop):
    res = await client.get(f"/api/v1/products/{lollipop.id}")

    assert res.status_code == 200
    assert res.json()["name"] == "Lollipop"


async def test_get_unknown_product_returns_404(client):
    res = await client.get(f"/api/v1/products/{uuid4()}")

    assert res.status_code == 404


async def test_update_stock_to_zero_clears_in_stock(client, lollipop):
    res = await client.patch(f"/api/v1/products/{lollipop.id}", json={"stock": 0})

    assert res.status_code == 200
    assert res.json()["stock"] == 0
    assert res.json()["in_stock"] is False


async def test_partial_update_keeps_other_fields(client, lollipop):
    res = await client.patch(
        f"/api/v1/products/{lollipop.id}", json={"price": "1.25"},
    )

    body = res.json()
    assert body["price"] == 1.25
    assert body["stock"] == 5
    assert body["name"] == "Lollipop"


async def test_update_rejects_in_stock_field(client, lollipop):
    res = await client.patch(
        f"/api/v1/products/{lollipop.id}", json={"in_stock": False},
    )

    assert res.status_code == 400


async def test_adjust_stock(client, lollipop):
    res = await client.post(
        f"/api/v1/products/{lollipop.id}/stock", json={"delta": -5},
    )
    assert res.status_code == 200
    assert res.json()["stock"] == 0
    assert res.json()["in_stock"] is False

    res = await client.post(
        f"/api/v1/products/{lollipop.id}/stock", json={"delta": 3},
    )
    assert res.json()["stock"] == 3
    assert res.json()["in_stock"] is True


async def test_adjust_stock_below_zero_returns_409(client, lollipop):
    res = await client.post(
        f"/api/v1/products/{lollipop.id}/stock", json={"delta": -6},
    )

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "STOCK_ADJUSTMENT_REJECTED"
    product = (await client.get(f"/api/v1/products/{lollipop.id}")).json()
    assert product["stock"] == 5


async def test_delete_product(client, lollipop):
    res = await client.delete(f"/api/v1/products/{lollipop.id}")

    assert res.status_code == 204
    assert (await client.get(f"/api/v1/products/{lollipop.id}")).status_code == 404


async def test_order_updates_cached_catalog(client, lollipop):
    assert (await client.get(f"/api/v1/products/{lollipop.id}")).json()["stock"] == 5

    await client.post("/api/v1/orders", json={
        "customer": {"name": "Ana"},
        "items": [{"product_id": str(lollipop.id), "quantity": 2}],
    })

    assert (await client.get(f"/api/v1/products/{lollipop.id}")).json()["stock"] == 3


async def test_update_rejects_null_stock(client, lollipop):
    res = await client.patch(f"/api/v1/products/{lollipop.id}", json={"stock": None})

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert (await client.get(f"/api/v1/products/{lollipop.id}")).json()["stock"] == 5


async def test_update_rejects_null_name(client, lollipop):
    res = await client.patch(f"/api/v1/products/{lollipop.id}", json={"name": None})

    assert res.status_code == 400


async def test_update_accepts_null_category(client, make_product):
    product = await make_product(name="Toffee", category="Chewy")

    res = await client.patch(f"/api/v1/products/{product.id}", json={"category": None})

    assert res.status_code == 200
    assert res.json()["category"] is None
