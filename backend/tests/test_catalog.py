"""
Tests for category and product listings.
"""
from decimal import Decimal

from sqlalchemy import text

from app.repositories import CategoryRepository, ProductRepository


async def test_list_categories(async_client, catalog):
    response = await async_client.get("/api/category")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [c["name"] for c in body["data"]] == ["Drinks", "Food"]
    assert set(body["data"][0]) == {"id", "name"}


async def test_list_categories_empty(async_client):
    response = await async_client.get("/api/category")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": []}


async def test_list_products(async_client, catalog):
    response = await async_client.get("/api/product")

    assert response.status_code == 200
    assert [p["name"] for p in response.json()["data"]] == ["Coffee", "Tea", "Cake"]


async def test_list_products_by_category(async_client, catalog):
    food = catalog.categories["Food"]

    response = await async_client.get(f"/api/product/{food.id}")

    assert response.status_code == 200
    assert response.json()["data"] == [{"id": catalog.products["Cake"].id, "name": "Cake"}]


async def test_list_products_unknown_category(async_client, catalog):
    response = await async_client.get("/api/product/999")

    assert response.status_code == 200
    assert response.json()["data"] == []


async def test_list_categories_failure_echoes_detail(async_client, engine):
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE products"))
        await conn.execute(text("DROP TABLE categories"))

    response = await async_client.get("/api/category")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Failed to get categories"
    assert "categories" in body["error"]


async def test_get_prices(db_session, catalog):
    repo = ProductRepository(db_session)
    coffee, cake = catalog.products["Coffee"], catalog.products["Cake"]

    prices = await repo.get_prices([coffee.id, cake.id, 999])

    assert set(prices) == {coffee.id, cake.id}
    assert prices[coffee.id] == Decimal("10.00")


async def test_get_prices_empty(db_session):
    assert await ProductRepository(db_session).get_prices([]) == {}


async def test_category_count(db_session, catalog):
    assert await CategoryRepository(db_session).count() == 2
