"""
Integration tests for categories, products, customers and vendors.
"""

import pytest

from tests.fixtures.data_fixtures import product_stock


class TestCategories:
    def test_crud(self, admin_client):
        response = admin_client.post(
            "/api/categories", json={"name": "Snacks", "description": "Crunchy"}
        )
        assert response.status_code == 201
        category_id = response.get_json()["data"]["id"]

        response = admin_client.patch(
            f"/api/categories/{category_id}", json={"description": "Salty"}
        )
        assert response.status_code == 200
        assert response.get_json()["data"] == {
            "id": category_id,
            "name": "Snacks",
            "description": "Salty",
            "createdAt": response.get_json()["data"]["createdAt"],
        }

        assert admin_client.delete(f"/api/categories/{category_id}").status_code == 204
        assert admin_client.get(f"/api/categories/{category_id}").status_code == 404

    def test_name_is_required(self, admin_client):
        response = admin_client.post("/api/categories", json={"description": "x"})

        assert response.status_code == 400
        assert response.get_json()["message"].startswith("name:")

    def test_category_in_use_cannot_be_deleted(self, admin_client, catalogue):
        response = admin_client.delete(f"/api/categories/{catalogue.category_id}")

        assert response.status_code == 409
        assert response.get_json()["success"] is False


class TestProducts:
    def test_list_includes_category_name(self, cashier_client, catalogue):
        response = cashier_client.get("/api/products")

        assert response.status_code == 200
        products = {p["code"]: p for p in response.get_json()["data"]}
        assert products["P001"]["categoryName"] == "Beverages"
        assert products["P001"]["sellPrice"] == 8.0

    def test_warehouse_creates_and_updates(self, warehouse_client, catalogue):
        response = warehouse_client.post(
            "/api/products",
            json={
                "code": "P003",
                "name": "Cocoa",
                "categoryId": catalogue.category_id,
                "costPrice": "3.10",
                "sellPrice": 5,
                "stock": 40,
            },
        )
        assert response.status_code == 201
        product = response.get_json()["data"]
        assert product["costPrice"] == 3.1
        assert product["stock"] == 40

        response = warehouse_client.put(
            f"/api/products/{product['id']}", json={"stock": 12}
        )
        assert response.status_code == 200
        assert response.get_json()["data"]["stock"] == 12
        assert response.get_json()["data"]["name"] == "Cocoa"

    def test_duplicate_code(self, admin_client, catalogue):
        response = admin_client.post(
            "/api/products",
            json={"code": "P001", "name": "Other", "costPrice": 1, "sellPrice": 2},
        )

        assert response.status_code == 409
        assert "P001" in response.get_json()["message"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"code": "X", "name": "X", "costPrice": -1, "sellPrice": 2},
            {"code": "X", "name": "X", "costPrice": 1, "sellPrice": 2, "stock": -5},
            {"code": "X", "name": "X", "costPrice": "abc", "sellPrice": 2},
            {"code": "X", "name": "X", "sellPrice": 2},
        ],
    )
    def test_invalid_products(self, admin_client, payload):
        assert admin_client.post("/api/products", json=payload).status_code == 400

    def test_unknown_category(self, admin_client, catalogue):
        response = admin_client.post(
            "/api/products",
            json={
                "code": "P009",
                "name": "Ghost",
                "categoryId": 999,
                "costPrice": 1,
                "sellPrice": 2,
            },
        )

        assert response.status_code == 400

    def test_missing_product(self, admin_client, database):
        assert admin_client.get("/api/products/404").status_code == 404
        assert admin_client.delete("/api/products/404").status_code == 404

    def test_delete(self, admin_client, catalogue):
        assert admin_client.delete(f"/api/products/{catalogue.tea_id}").status_code == 204
        assert admin_client.get(f"/api/products/{catalogue.tea_id}").status_code == 404

    def test_low_stock_uses_configured_threshold(self, warehouse_client, catalogue):
        response = warehouse_client.get("/api/products/low-stock")

        assert [p["code"] for p in response.get_json()["data"]] == ["P002"]

    def test_zero_threshold_falls_back_to_configured(self, warehouse_client, catalogue):
        response = warehouse_client.get("/api/products/low-stock/0")

        assert [p["code"] for p in response.get_json()["data"]] == ["P002"]

    def test_low_stock_with_explicit_threshold(self, warehouse_client, catalogue):
        response = warehouse_client.get("/api/products/low-stock/25")

        # Lowest stock first
        assert [p["code"] for p in response.get_json()["data"]] == ["P002", "P001"]
        assert product_stock(catalogue.coffee_id) == 20


@pytest.mark.parametrize(
    "resource,writer",
    [("customers", "cashier"), ("vendors", "warehouse")],
)
class TestContacts:
    def test_crud(self, login_as, admin_client, resource, writer):
        client = login_as(writer)

        response = client.post(
            f"/api/{resource}",
            json={"code": "X01", "name": "Example", "phone": "555", "address": "Main St"},
        )
        assert response.status_code == 201
        contact_id = response.get_json()["data"]["id"]

        response = client.patch(f"/api/{resource}/{contact_id}", json={"phone": "556"})
        assert response.status_code == 200
        assert response.get_json()["data"]["phone"] == "556"
        assert response.get_json()["data"]["name"] == "Example"

        listed = client.get(f"/api/{resource}").get_json()["data"]
        assert [c["code"] for c in listed] == ["X01"]

        # Only managers delete
        assert client.delete(f"/api/{resource}/{contact_id}").status_code == 403
        assert admin_client.delete(f"/api/{resource}/{contact_id}").status_code == 204

    def test_duplicate_code(self, login_as, resource, writer):
        client = login_as(writer)
        payload = {"code": "D01", "name": "First"}

        assert client.post(f"/api/{resource}", json=payload).status_code == 201
        assert client.post(f"/api/{resource}", json=payload).status_code == 409
