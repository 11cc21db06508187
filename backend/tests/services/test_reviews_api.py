"""Reviews API - list and submit product reviews."""

from uuid import uuid4


async def test_add_and_list_reviews(client, lollipop):
    res = await client.post(
        f"/api/v1/products/{lollipop.id}/reviews",
        json={"user_name": "Ana", "rating": 4, "comment": "Sweet!"},
    )
    assert res.status_code == 201
    assert res.json()["rating"] == 4

    res = await client.get(f"/api/v1/products/{lollipop.id}/reviews")

    assert res.status_code == 200
    assert [r["user_name"] for r in res.json()] == ["Ana"]


async def test_review_for_unknown_product_returns_404(client):
    res = await client.post(
        f"/api/v1/products/{uuid4()}/reviews", json={"user_name": "Ana"},
    )

    assert res.status_code == 404


async def test_review_rating_out_of_range_returns_400(client, lollipop):
    res = await client.post(
        f"/api/v1/products/{lollipop.id}/reviews",
        json={"user_name": "Ana", "rating": 0},
    )

    assert res.status_code == 400
