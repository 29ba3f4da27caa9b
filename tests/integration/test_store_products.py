"""Integration tests for the storefront and owner catalog endpoints."""

import uuid

import pytest
from tests.factories import ProductFactory, UserFactory, make_auth_user, override_auth

# ---------------------------------------------------------------------------
# Storefront
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_public_listing(client, db_session):
    """GET /products/public: active products with prices and categories."""
    store_id = str(uuid.uuid4())
    db_session.add_all(
        [
            ProductFactory.create(store_id=store_id, name="Ghee", category="Dairy",
                                  price=500, mrp=600, discount=10, stock=3),
            ProductFactory.create(store_id=store_id, name="Paneer", category="Dairy",
                                  price=90, stock=0),
            ProductFactory.create(store_id=store_id, name="Old", is_active=False),
        ]
    )
    await db_session.commit()

    response = await client.get(
        "/api/products/public", params={"storeId": store_id, "sort": "name"}
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    assert [p["name"] for p in body["products"]] == ["Ghee", "Paneer"]
    assert body["products"][0]["finalPrice"] == 540.0
    assert body["products"][0]["inStock"] is True
    assert body["products"][1]["inStock"] is False
    assert "costPrice" not in body["products"][0]
    assert body["categories"] == ["Dairy"]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 2, "pages": 1}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_public_listing_requires_store(client, db_session):
    response = await client.get("/api/products/public")

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_public_product_detail(client, db_session):
    product = ProductFactory.create(stock=2, min_stock_level=5)
    hidden = ProductFactory.create(is_active=False)
    db_session.add_all([product, hidden])
    await db_session.commit()

    found = await client.get(f"/api/products/public/{product.id}")
    missing = await client.get(f"/api/products/public/{hidden.id}")

    assert found.status_code == 200
    assert found.json()["product"]["stockStatus"] == "low_stock"
    assert missing.status_code == 404


# ---------------------------------------------------------------------------
# Owner catalog
# ---------------------------------------------------------------------------


async def _owner(db):
    owner = UserFactory.create_owner(store_name="Mehta Mart")
    db.add(owner)
    await db.commit()
    return owner


@pytest.mark.asyncio
@pytest.mark.integration
async def test_owner_creates_and_lists_products(client, store_app, db_session):
    owner = await _owner(db_session)

    with override_auth(store_app, make_auth_user(owner)):
        created = await client.post(
            "/api/products",
            json={"name": "Atta 5kg", "category": "Staples", "price": 240,
                  "costPrice": 200, "stock": 12, "unit": "kg"},
        )
        listed = await client.get("/api/products", params={"search": "atta"})
        categories = await client.get("/api/products/categories")

    assert created.status_code == 201, created.text
    product = created.json()["product"]
    assert product["sku"].startswith("MEH-")
    assert product["storeId"] == owner.store_id
    assert product["costPrice"] == 200.0
    assert listed.json()["pagination"]["total"] == 1
    assert categories.json()["categories"] == ["Staples"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_sku_is_409(client, store_app, db_session):
    owner = await _owner(db_session)
    db_session.add(ProductFactory.create(store_id=owner.store_id, sku="ATTA-5"))
    await db_session.commit()

    with override_auth(store_app, make_auth_user(owner)):
        response = await client.post(
            "/api/products",
            json={"name": "Atta", "sku": "atta-5", "category": "Staples",
                  "price": 240, "costPrice": 200},
        )

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_owner_updates_stock_and_visibility(client, store_app, db_session):
    owner = await _owner(db_session)
    product = ProductFactory.create(store_id=owner.store_id, stock=1, min_stock_level=5)
    db_session.add(product)
    await db_session.commit()

    with override_auth(store_app, make_auth_user(owner)):
        low = await client.get("/api/products/low-stock")
        stock = await client.patch(f"/api/products/{product.id}/stock", json={"stock": 30})
        negative = await client.patch(f"/api/products/{product.id}/stock", json={"stock": -1})
        hidden = await client.patch(
            f"/api/products/{product.id}/status", json={"isActive": False}
        )

    assert [p["id"] for p in low.json()["products"]] == [str(product.id)]
    assert stock.json()["product"]["stock"] == 30
    assert negative.status_code == 400
    assert hidden.json()["product"]["isActive"] is False
    assert hidden.json()["message"] == "Product deactivated successfully"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_owner_patch_and_delete(client, store_app, db_session):
    owner = await _owner(db_session)
    product = ProductFactory.create(store_id=owner.store_id)
    foreign = ProductFactory.create()
    db_session.add_all([product, foreign])
    await db_session.commit()

    with override_auth(store_app, make_auth_user(owner)):
        patched = await client.patch(
            f"/api/products/{product.id}", json={"brand": "Aashirvaad", "discount": 5}
        )
        not_mine = await client.get(f"/api/products/{foreign.id}")
        deleted = await client.request(
            "DELETE",
            "/api/products",
            json={"productIds": [str(product.id), str(foreign.id)]},
        )

    assert patched.json()["product"]["brand"] == "Aashirvaad"
    assert patched.json()["product"]["discount"] == 5.0
    assert not_mine.status_code == 404
    assert deleted.json()["deletedCount"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_customer_cannot_manage_products(client, store_app, db_session):
    customer = UserFactory.create()
    db_session.add(customer)
    await db_session.commit()

    with override_auth(store_app, make_auth_user(customer)):
        response = await client.get("/api/products")

    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_patch_with_null_required_field_is_400(client, store_app, db_session):
    owner = await _owner(db_session)
    product = ProductFactory.create(store_id=owner.store_id, name="Poha 1kg")
    db_session.add(product)
    await db_session.commit()

    with override_auth(store_app, make_auth_user(owner)):
        null_name = await client.patch(f"/api/products/{product.id}", json={"name": None})
        null_price = await client.patch(f"/api/products/{product.id}", json={"price": None})
        detail = await client.get(f"/api/products/{product.id}")

    assert null_name.status_code == 400, null_name.text
    assert null_name.json()["error"] == "validation"
    assert null_price.status_code == 400
    assert detail.json()["product"]["name"] == "Poha 1kg"
