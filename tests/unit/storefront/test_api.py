"""HTTP-level tests: routing, auth gates and envelopes, with injected repositories."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from storefront import StorefrontService
from storefront.core.settings import StorefrontSettings
from storefront.repositories.query import Query

TEST_SECRET = "api-test-secret-key-with-32-bytes!!!"
USER_ID = "64b7f0c2a1b2c3d4e5f60718"
ADMIN_ID = "64b7f0c2a1b2c3d4e5f60719"
PRODUCT_ID = "64b7f0c2a1b2c3d4e5f60721"
CATEGORY_ID = "64b7f0c2a1b2c3d4e5f60720"

PRODUCT_FORM = {
    "name": "Desk Lamp",
    "description": "Warm light",
    "price": "19.5",
    "category": CATEGORY_ID,
    "quantity": "4",
    "shipping": "true",
}


@pytest.fixture
def repos():
    users = AsyncMock()

    async def find_user(user_id):
        roles = {USER_ID: 0, ADMIN_ID: 1}
        if user_id not in roles:
            return None
        return {"_id": user_id, "name": "Ada", "role": roles[user_id]}

    users.find_by_id.side_effect = find_user
    return {"users": users, "categories": AsyncMock(), "products": AsyncMock(), "orders": AsyncMock()}


@pytest.fixture
def service(repos) -> StorefrontService:
    settings = StorefrontSettings(JWT_SECRET=TEST_SECRET, LOG_JSON=False, PHOTO_MAX_BYTES=1_000, _env_file=None)
    return StorefrontService(settings, enable_db=False, repositories=repos)


@pytest.fixture
def client(service) -> TestClient:
    return TestClient(service.app)


def auth_header(service: StorefrontService, user_id: str) -> dict:
    return {"Authorization": f"Bearer {service.signer.create_access_token(user_id)}"}


class TestRootEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_welcome(self, client):
        assert "Welcome" in client.get("/").json()["message"]

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-1"})

        assert response.headers["X-Request-ID"] == "req-1"


class TestGates:
    def test_sign_in_required(self, client):
        response = client.get("/api/v1/auth/user-auth")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Sign in required"}

    def test_invalid_token(self, client):
        response = client.get("/api/v1/auth/user-auth", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json()["message"] == "Sign in required"

    def test_signed_in(self, client, service):
        response = client.get("/api/v1/auth/user-auth", headers=auth_header(service, USER_ID))

        assert response.json() == {"ok": True}

    def test_raw_token_header(self, client, service):
        token = service.signer.create_access_token(USER_ID)

        response = client.get("/api/v1/auth/user-auth", headers={"Authorization": token})

        assert response.status_code == 200

    def test_customer_is_not_admin(self, client, service):
        response = client.get("/api/v1/auth/admin-auth", headers=auth_header(service, USER_ID))

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "UnAuthorized Access"}

    def test_admin(self, client, service):
        response = client.get("/api/v1/auth/admin-auth", headers=auth_header(service, ADMIN_ID))

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_admin_lookup_failure(self, client, service):
        response = client.get("/api/v1/auth/admin-auth", headers=auth_header(service, "64b7f0c2a1b2c3d4e5f60799"))

        assert response.status_code == 401
        body = response.json()
        assert body["message"] == "Error in admin middleware"
        assert "not found" in body["error"]

    def test_protected_probe(self, client, service):
        response = client.get("/api/v1/auth/test", headers=auth_header(service, ADMIN_ID))

        assert response.json() == "Protected Routes"

    def test_admin_gate_runs_before_handler(self, client, service, repos):
        response = client.delete(
            f"/api/v1/category/delete-category/{CATEGORY_ID}", headers=auth_header(service, USER_ID)
        )

        assert response.status_code == 401
        repos["categories"].delete_by_id.assert_not_awaited()


class TestAuthRoutes:
    def test_register(self, client, repos):
        repos["users"].get_by_email.return_value = None
        repos["users"].insert.side_effect = lambda data: {"_id": USER_ID, "role": 0, **data}

        response = client.post(
            "/api/v1/auth/register",
            json={
                "name": "Ada",
                "email": "ada@example.com",
                "password": "secret123",
                "phone": "555-0100",
                "address": "1 Loop Road",
                "answer": "blue",
            },
        )

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "ada@example.com"
        assert "password" not in response.json()["user"]

    def test_register_missing_name(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "ada@example.com"})

        assert response.status_code == 200
        assert response.json() == {"error": "Name is Required"}

    def test_login_without_body(self, client):
        response = client.post("/api/v1/auth/login")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Invalid email or password"}

    def test_forgot_password_accepts_camel_case(self, client, repos):
        repos["users"].find_one.return_value = None

        response = client.post(
            "/api/v1/auth/forgot-password",
            json={"email": "ada@example.com", "answer": "blue", "newPassword": "fresh-pass"},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Wrong Email Or Answer"

    def test_orders_of_signed_in_user(self, client, service, repos):
        repos["orders"].find.return_value = []

        response = client.get("/api/v1/auth/orders", headers=auth_header(service, USER_ID))

        assert response.json() == []
        query = repos["orders"].find.await_args.args[0]
        assert query.filters == {"buyer": USER_ID}


class TestProductRoutes:
    def test_pagination(self, client, repos):
        repos["products"].find.return_value = []

        client.get("/api/v1/product/product-list/3")

        repos["products"].find.assert_awaited_once_with(
            Query().select("-photo").skip(12).limit(6).sort({"created_at": -1})
        )

    def test_pagination_defaults_to_first_page(self, client, repos):
        repos["products"].find.return_value = []

        response = client.get("/api/v1/product/product-list")

        assert response.json() == {"success": True, "products": []}
        assert repos["products"].find.await_args.args[0].offset == 0

    def test_create_product_multipart(self, client, service, repos):
        repos["products"].insert.side_effect = lambda data: {"_id": PRODUCT_ID, **data}

        response = client.post(
            "/api/v1/product/create-product",
            data=PRODUCT_FORM,
            files={"photo": ("lamp.png", b"\x89PNG-data", "image/png")},
            headers=auth_header(service, ADMIN_ID),
        )

        assert response.status_code == 201
        stored = repos["products"].insert.await_args.args[0]
        assert stored["price"] == 19.5
        assert stored["quantity"] == 4
        assert stored["shipping"] is True
        assert stored["photo"] == {"data": b"\x89PNG-data", "content_type": "image/png"}

    def test_create_product_oversized_photo(self, client, service, repos):
        response = client.post(
            "/api/v1/product/create-product",
            data=PRODUCT_FORM,
            files={"photo": ("big.png", b"x" * 1_001, "image/png")},
            headers=auth_header(service, ADMIN_ID),
        )

        assert response.status_code == 500
        assert response.json() == {"error": "photo is Required and should be less then 1mb"}
        repos["products"].insert.assert_not_awaited()

    def test_create_product_requires_admin(self, client, service, repos):
        response = client.post(
            "/api/v1/product/create-product", data=PRODUCT_FORM, headers=auth_header(service, USER_ID)
        )

        assert response.status_code == 401
        repos["products"].insert.assert_not_awaited()

    def test_product_photo(self, client, repos):
        repos["products"].find_by_id.return_value = {
            "_id": PRODUCT_ID,
            "photo": {"data": b"\x89PNG", "content_type": "image/png"},
        }

        response = client.get(f"/api/v1/product/product-photo/{PRODUCT_ID}")

        assert response.status_code == 200
        assert response.content == b"\x89PNG"
        assert response.headers["content-type"] == "image/png"

    def test_filters(self, client, repos):
        repos["products"].find.return_value = []

        response = client.post("/api/v1/product/product-filters", json={"checked": [CATEGORY_ID], "radio": [0, 50]})

        assert response.json() == {"success": True, "products": []}

    def test_checkout(self, client, service, repos):
        repos["orders"].insert.side_effect = lambda data: {"_id": "order-1", "payment": {}, **data}

        response = client.post(
            "/api/v1/product/checkout",
            json={"products": [PRODUCT_ID]},
            headers=auth_header(service, USER_ID),
        )

        assert response.status_code == 201
        assert response.json()["order"]["buyer"] == USER_ID

    def test_category_listing_is_public(self, client, repos):
        repos["categories"].find.return_value = [{"_id": CATEGORY_ID, "name": "Lighting", "slug": "lighting"}]

        response = client.get("/api/v1/category/get-category")

        assert response.status_code == 200
        assert response.json()["category"][0]["slug"] == "lighting"
