"""
API tests: routing, authentication and error mapping.

Domain rules are covered in the service tests; here we check that the
HTTP layer exposes them with the right status codes and shapes.
"""
import uuid
from decimal import Decimal

import pytest

API = "/api/v1"


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")


class TestHealthAndAuth:

    def test_health_check(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_cart_requires_token(self, client):
        assert client.get(f"{API}/cart").status_code == 401

    def test_invalid_token_rejected(self, client):
        response = client.get(
            f"{API}/cart", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    def test_token_without_email_rejected(self, client, make_token):
        token = make_token(uuid.uuid4(), "")

        response = client.get(
            f"{API}/auth/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    def test_first_request_provisions_profile(self, client, make_token):
        user_id = uuid.uuid4()
        token = make_token(user_id, "New.Customer@Example.com")

        response = client.get(
            f"{API}/auth/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"]["id"] == str(user_id)
        assert body["user"]["email"] == "new.customer@example.com"
        assert body["user"]["name"] == "new.customer"
        assert body["user"]["role"] == "user"

    def test_profile_requires_token(self, client):
        assert client.get(f"{API}/auth/profile").status_code == 401

    def test_update_profile_name(self, client, user, auth_header):
        response = client.put(
            f"{API}/auth/profile", json={"name": " Ada "}, headers=auth_header(user)
        )

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Ada"

    def test_profile_role_is_not_editable(self, client, user, auth_header):
        response = client.put(
            f"{API}/auth/profile",
            json={"name": "Ada", "role": "admin"},
            headers=auth_header(user),
        )

        assert response.status_code == 422


class TestProductsApi:

    def test_list_with_filters_and_pagination(self, client, make_product):
        make_product(name="Tablet", price=Decimal("150"))
        make_product(name="Laptop", price=Decimal("450"))
        make_product(name="TV", price=Decimal("600"))
        make_product(name="Shirt", price=Decimal("120"), category="clothing")

        response = client.get(
            f"{API}/products",
            params={
                "category": "electronics",
                "min_price": 100,
                "max_price": 500,
                "sort_by": "price",
                "sort_order": "asc",
                "page": 1,
                "limit": 1,
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert [p["name"] for p in body["items"]] == ["Tablet"]
        assert body["pagination"] == {
            "current_page": 1,
            "limit": 1,
            "total_pages": 2,
            "total_items": 2,
            "has_next_page": True,
            "has_prev_page": False,
        }

    def test_bad_paging_is_400(self, client):
        response = client.get(f"{API}/products", params={"page": 0})

        assert response.status_code == 400

    def test_bad_sort_order_is_422(self, client):
        response = client.get(f"{API}/products", params={"sort_order": "sideways"})

        assert response.status_code == 422

    def test_categories_route(self, client, make_product):
        make_product(category="books")
        make_product(category="toys")

        response = client.get(f"{API}/products/categories")

        assert response.status_code == 200
        assert response.json() == {"categories": ["books", "toys"]}

    def test_category_route(self, client, make_product):
        make_product(name="Novel", category="books")
        make_product(name="Ball", category="sports")

        response = client.get(f"{API}/products/category/BOOKS")

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["items"]] == ["Novel"]

    def test_get_missing_product_is_404(self, client):
        response = client.get(f"{API}/products/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

    def test_create_requires_admin(self, client, user, auth_header):
        payload = {
            "name": "Lamp",
            "description": "LED lamp",
            "price": "19.99",
            "category": "home",
        }

        assert client.post(f"{API}/products", json=payload).status_code == 401
        response = client.post(f"{API}/products", json=payload, headers=auth_header(user))
        assert response.status_code == 403

    def test_admin_create_update_delete(self, client, admin, auth_header):
        headers = auth_header(admin)

        created = client.post(
            f"{API}/products",
            json={
                "name": "Lamp",
                "description": "LED lamp",
                "price": "19.99",
                "category": "home",
                "stock": 4,
            },
            headers=headers,
        )
        assert created.status_code == 201
        product_id = created.json()["id"]

        updated = client.patch(
            f"{API}/products/{product_id}", json={"price": "24.50"}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["price"] == 24.5

        deleted = client.delete(f"{API}/products/{product_id}", headers=headers)
        assert deleted.status_code == 200
        assert client.get(f"{API}/products/{product_id}").status_code == 404

    def test_patch_null_brand_clears_it(self, client, admin, make_product, auth_header):
        product = make_product(brand="Logi")

        response = client.patch(
            f"{API}/products/{product.id}",
            json={"brand": None},
            headers=auth_header(admin),
        )

        assert response.status_code == 200
        assert response.json()["brand"] is None
        assert response.json()["name"] == "Wireless Mouse"

    def test_patch_null_name_is_422(self, client, admin, make_product, auth_header):
        product = make_product()

        response = client.patch(
            f"{API}/products/{product.id}",
            json={"name": None},
            headers=auth_header(admin),
        )

        assert response.status_code == 422

    def test_create_missing_fields_is_400(self, client, admin, auth_header):
        response = client.post(
            f"{API}/products", json={"name": "Lamp"}, headers=auth_header(admin)
        )

        assert response.status_code == 400

    def test_create_unknown_category_is_422(self, client, admin, auth_header):
        response = client.post(
            f"{API}/products",
            json={
                "name": "Lamp",
                "description": "LED lamp",
                "price": "19.99",
                "category": "weapons",
            },
            headers=auth_header(admin),
        )

        assert response.status_code == 422


class TestCartApi:

    def test_empty_cart_and_count(self, client, user, auth_header):
        headers = auth_header(user)

        cart = client.get(f"{API}/cart", headers=headers)
        count = client.get(f"{API}/cart/count", headers=headers)

        assert cart.status_code == 200
        assert cart.json()["items"] == []
        assert cart.json()["total_items"] == 0
        assert count.json() == {"count": 0}

    def test_cart_flow(self, client, user, make_product, auth_header):
        headers = auth_header(user)
        product = make_product(stock=10, price=Decimal("20.00"))

        response = client.post(
            f"{API}/cart",
            json={"product_id": str(product.id), "quantity": 3},
            headers=headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["total_items"] == 3
        assert body["total_amount"] == 60.0
        assert body["items"][0]["price"] == 20.0
        assert body["items"][0]["line_total"] == 60.0
        assert body["items"][0]["product"]["price"] == 20.0
        assert body["items"][0]["product"]["name"] == "Wireless Mouse"

        response = client.patch(
            f"{API}/cart/{product.id}", json={"quantity": 2}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["total_amount"] == 40.0

        assert client.get(f"{API}/cart/count", headers=headers).json() == {"count": 2}

        response = client.delete(f"{API}/cart/{product.id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["total_items"] == 0

        response = client.delete(f"{API}/cart", headers=headers)
        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_add_without_quantity_defaults_to_one(
        self, client, user, make_product, auth_header
    ):
        product = make_product()

        response = client.post(
            f"{API}/cart", json={"product_id": str(product.id)}, headers=auth_header(user)
        )

        assert response.json()["total_items"] == 1

    def test_insufficient_stock_is_400(self, client, user, make_product, auth_header):
        product = make_product(stock=3)

        response = client.post(
            f"{API}/cart",
            json={"product_id": str(product.id), "quantity": 5},
            headers=auth_header(user),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Insufficient stock available"

    def test_zero_quantity_update_is_400(self, client, user, make_product, auth_header):
        headers = auth_header(user)
        product = make_product()
        client.post(
            f"{API}/cart", json={"product_id": str(product.id)}, headers=headers
        )

        response = client.patch(
            f"{API}/cart/{product.id}", json={"quantity": 0}, headers=headers
        )

        assert response.status_code == 400
        assert client.get(f"{API}/cart/count", headers=headers).json() == {"count": 1}

    def test_clear_without_cart_is_404(self, client, user, auth_header):
        response = client.delete(f"{API}/cart", headers=auth_header(user))

        assert response.status_code == 404
        assert response.json()["detail"] == "Cart not found"

    def test_add_unknown_product_is_404(self, client, user, auth_header):
        response = client.post(
            f"{API}/cart",
            json={"product_id": str(uuid.uuid4()), "quantity": 1},
            headers=auth_header(user),
        )

        assert response.status_code == 404
