"""Tests for the products API."""

import pytest
from sqlalchemy import select

from mye_backend.models.product import Product, ProductFeature


def product_body(**overrides):
    body = {
        "name": "Acti9 iC60N 3P 25A",
        "sku": "SCH-IC60N-3P25A",
        "brand": "SCHNEIDER ELECTRIC",
        "category": "Devre Kesiciler",
        "originalPrice": 119.9,
        "currentPrice": 89.9,
        "stockQuantity": 45,
        "features": ["3 poles", "25A rated current"],
        "technicalSpecs": [{"label": "Poles", "value": "3P"}],
        "images": ["/uploads/ic60n.png"],
    }
    body.update(overrides)
    return body


@pytest.fixture
def created(client):
    response = client.post("/api/products", json=product_body())
    assert response.status_code == 201
    return response.json()["data"]


class TestCreateProduct:
    def test_create_returns_camel_case(self, created):
        assert created["sku"] == "SCH-IC60N-3P25A"
        assert created["currentPrice"] == 89.9
        assert created["stockStatus"] == "in_stock"
        assert created["features"] == ["3 poles", "25A rated current"]
        assert created["technicalSpecs"] == [{"label": "Poles", "value": "3P"}]
        assert created["images"] == ["/uploads/ic60n.png"]

    @pytest.mark.parametrize(
        "quantity,expected",
        [(0, "out_of_stock"), (7, "low_stock"), (11, "in_stock")],
    )
    def test_stock_status_derived_from_quantity(self, client, quantity, expected):
        response = client.post("/api/products", json=product_body(sku=f"SKU-{quantity}", stockQuantity=quantity))

        assert response.json()["data"]["stockStatus"] == expected

    def test_explicit_stock_status_kept(self, client):
        response = client.post("/api/products", json=product_body(stockStatus="out_of_stock"))

        assert response.json()["data"]["stockStatus"] == "out_of_stock"

    def test_duplicate_sku(self, client, created):
        response = client.post("/api/products", json=product_body(name="Other"))

        assert response.status_code == 400
        assert response.json()["errorType"] == "DuplicateError"

    def test_sku_of_deleted_product_still_taken(self, client, created):
        client.delete(f"/api/products/{created['id']}")

        response = client.post("/api/products", json=product_body())

        assert response.status_code == 400
        assert "including deleted products" in response.json()["error"]

    def test_missing_required_fields(self, client):
        response = client.post("/api/products", json={"name": "No sku"})

        assert response.status_code == 400
        assert set(response.json()["fields"]) >= {"sku", "brand", "originalPrice", "currentPrice"}


class TestReadProducts:
    def test_get_one(self, client, created):
        response = client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Acti9 iC60N 3P 25A"

    def test_get_missing(self, client):
        response = client.get("/api/products/999")

        assert response.status_code == 404
        assert response.json()["error"] == "Product not found or deleted"

    def test_list_filters(self, client):
        client.post("/api/products", json=product_body(sku="A", name="Breaker A", brand="ABB", currentPrice=50))
        client.post("/api/products", json=product_body(sku="B", name="Breaker B", brand="ABB", currentPrice=150))
        client.post("/api/products", json=product_body(sku="C", name="Contactor", brand="EATON", currentPrice=70))

        by_brand = client.get("/api/products", params={"brand": "ABB"}).json()
        assert by_brand["pagination"]["total"] == 2

        by_search = client.get("/api/products", params={"search": "contact"}).json()
        assert [p["sku"] for p in by_search["data"]] == ["C"]

        by_price = client.get("/api/products", params={"minPrice": 60, "maxPrice": 100}).json()
        assert [p["sku"] for p in by_price["data"]] == ["C"]

        sorted_asc = client.get("/api/products", params={"sortBy": "current_price", "sortOrder": "ASC"}).json()
        assert [p["sku"] for p in sorted_asc["data"]] == ["A", "C", "B"]

    def test_filter_by_stock_status(self, client):
        client.post("/api/products", json=product_body(sku="EMPTY", stockQuantity=0))
        client.post("/api/products", json=product_body(sku="FULL", stockQuantity=100))

        body = client.get("/api/products", params={"stockStatus": "out_of_stock"}).json()

        assert [p["sku"] for p in body["data"]] == ["EMPTY"]

    def test_deleted_products_hidden(self, client, created):
        client.delete(f"/api/products/{created['id']}")

        body = client.get("/api/products").json()

        assert body["data"] == []
        assert body["pagination"]["total"] == 0


class TestUpdateProduct:
    def test_partial_update(self, client, created):
        response = client.put(f"/api/products/{created['id']}", json={"currentPrice": 79.9})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["currentPrice"] == 79.9
        assert data["name"] == created["name"]
        assert data["features"] == created["features"]

    def test_quantity_change_recomputes_status(self, client, created):
        data = client.put(f"/api/products/{created['id']}", json={"stockQuantity": 3}).json()["data"]

        assert data["stockQuantity"] == 3
        assert data["stockStatus"] == "low_stock"

    def test_features_replaced(self, client, database, created):
        data = client.put(f"/api/products/{created['id']}", json={"features": ["DIN rail"]}).json()["data"]

        assert data["features"] == ["DIN rail"]
        with database.session() as session:
            rows = session.scalars(select(ProductFeature).where(ProductFeature.product_id == created["id"])).all()
            assert [r.feature for r in rows] == ["DIN rail"]

    def test_nullable_field_cleared(self, client, created):
        data = client.put(f"/api/products/{created['id']}", json={"category": None}).json()["data"]

        assert data["category"] is None

    def test_null_required_field_rejected(self, client, created):
        response = client.put(f"/api/products/{created['id']}", json={"name": None})

        assert response.status_code == 400
        assert response.json()["fields"] == ["name"]

    def test_empty_update(self, client, created):
        response = client.put(f"/api/products/{created['id']}", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "No fields provided to update"

    def test_unknown_fields_ignored(self, client, database, created):
        response = client.put(f"/api/products/{created['id']}", json={"isDeleted": True, "name": "Renamed"})

        assert response.status_code == 200
        with database.session() as session:
            assert session.get(Product, created["id"]).is_deleted is False

    def test_sku_conflict(self, client, created):
        other = client.post("/api/products", json=product_body(sku="OTHER")).json()["data"]

        response = client.put(f"/api/products/{other['id']}", json={"sku": created["sku"]})

        assert response.status_code == 400
        assert response.json()["errorType"] == "DuplicateError"

    def test_update_deleted_product(self, client, created):
        client.delete(f"/api/products/{created['id']}")

        response = client.put(f"/api/products/{created['id']}", json={"name": "Back"})

        assert response.status_code == 404


class TestDeleteProduct:
    def test_soft_delete_keeps_row(self, client, database, created):
        response = client.delete(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted successfully"}
        with database.session() as session:
            assert session.get(Product, created["id"]).is_deleted is True

    def test_delete_twice(self, client, created):
        client.delete(f"/api/products/{created['id']}")

        response = client.delete(f"/api/products/{created['id']}")

        assert response.status_code == 404
