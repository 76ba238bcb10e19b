"""课程应用 HTTP 接口"""

import pytest
from fastapi.testclient import TestClient


def create_product(client, **overrides):
    body = {"title": "Laptop", "description": "A fast laptop", "price": 999}
    body.update(overrides)
    return client.post("/api/products", json=body)


def register(client, email="ann@example.com", password="secret1", **extra):
    return client.post("/api/users/auth/register", json={"email": email, "password": password, **extra})


class TestHealth:

    def test_health_endpoints(self, client):
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/health/live").json()["status"] == "alive"

        ready = client.get("/health/ready").json()
        assert ready["status"] == "ready"
        assert ready["container"]["bootstrapped"] is True


class TestProducts:

    def test_create_and_fetch(self, client):
        response = create_product(client)

        assert response.status_code == 201
        product = response.json()
        assert product["id"] == 1
        assert product["price"] == 999

        assert client.get(f"/api/products/{product['id']}").json()["title"] == "Laptop"
        assert [p["id"] for p in client.get("/api/products").json()] == [1]

    def test_numeric_strings_are_coerced(self, client):
        response = create_product(client, price="12.5")

        assert response.status_code == 201
        assert response.json()["price"] == 12.5

    def test_unknown_fields_are_rejected(self, client):
        response = create_product(client, discount=10)

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["code"] == 422
        assert body["data"]["fieldErrors"][0]["loc"][-1] == "discount"

    @pytest.mark.parametrize("overrides", [
        {"title": "L"},
        {"price": 1001},
        {"price": -1},
        {"description": "abc"},
        {"price": "cheap"},
    ])
    def test_invalid_fields_are_rejected(self, client, overrides):
        assert create_product(client, **overrides).status_code == 422

    def test_update(self, client):
        product_id = create_product(client).json()["id"]

        response = client.put(f"/api/products/{product_id}", json={"price": "500"})

        assert response.status_code == 200
        assert response.json()["price"] == 500
        assert response.json()["title"] == "Laptop"

    def test_update_rejects_null_for_required_fields(self, client):
        product_id = create_product(client).json()["id"]

        for body in ({"title": None}, {"price": None}):
            response = client.put(f"/api/products/{product_id}", json=body)

            assert response.status_code == 422
            assert response.json()["success"] is False

        assert client.get(f"/api/products/{product_id}").json()["title"] == "Laptop"

    def test_update_can_clear_description(self, client):
        product_id = create_product(client).json()["id"]

        response = client.put(f"/api/products/{product_id}", json={"description": None})

        assert response.status_code == 200
        assert response.json()["description"] is None

    def test_delete(self, client):
        product_id = create_product(client).json()["id"]

        assert client.delete(f"/api/products/{product_id}").status_code == 200
        assert client.get(f"/api/products/{product_id}").status_code == 404

    def test_missing_product(self, client):
        response = client.get("/api/products/42")

        assert response.status_code == 404
        assert response.json() == {"success": False, "code": 404, "message": "Product not found"}

    def test_path_id_must_be_numeric(self, client):
        assert client.get("/api/products/abc").status_code == 422


class TestUsers:

    def test_register_hides_password(self, client):
        response = register(client, username="ann")

        assert response.status_code == 201
        user = response.json()
        assert user["email"] == "ann@example.com"
        assert user["user_type"] == "normal_user"
        assert user["is_account_verified"] is False
        assert "password" not in user

    def test_duplicate_email(self, client):
        register(client)

        response = register(client, email="ANN@example.com")

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists"

    def test_invalid_email(self, client):
        assert register(client, email="not-an-email").status_code == 422

    def test_short_password(self, client):
        assert register(client, password="123").status_code == 422

    def test_login(self, client):
        register(client)

        ok = client.post("/api/users/auth/login", json={"email": "ann@example.com", "password": "secret1"})
        bad = client.post("/api/users/auth/login", json={"email": "ann@example.com", "password": "wrong-pw"})

        assert ok.status_code == 200
        assert ok.json()["email"] == "ann@example.com"
        assert bad.status_code == 400

    def test_list_users(self, client):
        register(client)
        register(client, email="bob@example.com")

        assert len(client.get("/api/users").json()) == 2


class TestReviews:

    def test_review_flow_crosses_the_cycle(self, client):
        user_id = register(client).json()["id"]
        product_id = create_product(client).json()["id"]

        response = client.post(
            f"/api/reviews/{user_id}",
            json={"rating": "5", "comment": "Great", "product_id": product_id},
        )

        assert response.status_code == 201
        assert response.json()["user_id"] == user_id
        assert response.json()["rating"] == 5

        reviews = client.get(f"/api/users/{user_id}/reviews").json()
        assert [r["comment"] for r in reviews] == ["Great"]
        assert len(client.get("/api/reviews").json()) == 1

    def test_review_for_unknown_user(self, client):
        response = client.post("/api/reviews/99", json={"rating": 4, "comment": "Nice"})

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_rating_out_of_range(self, client):
        user_id = register(client).json()["id"]

        assert client.post(f"/api/reviews/{user_id}", json={"rating": 6, "comment": "Too good"}).status_code == 422

    def test_reviews_of_unknown_user(self, client):
        assert client.get("/api/users/7/reviews").status_code == 404


def test_lazy_mode_skips_bootstrap():
    from app.main import create_application

    application = create_application(container__eager_bootstrap=False)

    assert application.container.is_bootstrapped is False
    with TestClient(application.get_fastapi_app()) as client:
        assert client.get("/api/products").json() == []
        assert client.get("/health/ready").json()["status"] == "starting"


def test_shutdown_clears_data_source():
    from app.app_module import AppModule
    from app.main import create_application
    from modboot.data import DATA_SOURCE

    application = create_application()
    with TestClient(application.get_fastapi_app()) as client:
        data_source = application.resolve(AppModule, DATA_SOURCE)
        create_product(client)
        assert len(data_source.table("products")) == 1

    assert data_source.table("products") == {}
