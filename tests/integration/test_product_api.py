"""REST contract tests for /api/products."""

import pytest

from src.catalog.api.http.deps import get_product_repository

pytestmark = pytest.mark.integration


def _create(client, payload):
    response = client.post("/api/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateProduct:
    def test_create_returns_created_product(self, client, product_payload):
        response = client.post("/api/products", json=product_payload)

        assert response.status_code == 201
        body = response.json()
        assert isinstance(body["id"], int)
        assert body["name"] == product_payload["name"]
        assert body["description"] == product_payload["description"]
        assert body["price"] == 89.99
        assert body["imageUrl"] == product_payload["imageUrl"]
        assert set(body) == {"id", "name", "description", "price", "imageUrl"}

    def test_create_sets_location_header(self, client, product_payload):
        response = client.post("/api/products", json=product_payload)

        product_id = response.json()["id"]
        assert response.headers["location"].endswith(f"/api/products/{product_id}")

    def test_create_then_fetch_returns_same_fields(self, client, product_payload):
        created = _create(client, product_payload)

        response = client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_image_url_is_optional(self, client, product_payload):
        del product_payload["imageUrl"]

        created = _create(client, product_payload)

        assert created["imageUrl"] is None

    def test_body_id_is_ignored_on_create(self, client, product_payload):
        created = _create(client, {**product_payload, "id": 999})

        assert created["id"] != 999

    @pytest.mark.parametrize(
        "override",
        [
            {"name": None},
            {"name": ""},
            {"name": "n" * 201},
            {"description": None},
            {"description": "d" * 1001},
            {"imageUrl": "u" * 501},
            {"price": -1},
            {"price": 10.001},
            {"price": 123456789.12},
            {"price": "not-a-number"},
        ],
    )
    def test_out_of_bounds_input_is_rejected(self, client, product_payload, override):
        response = client.post("/api/products", json={**product_payload, **override})

        assert response.status_code == 422
        assert client.get("/api/products").json() == []

    def test_missing_required_field_is_reported(self, client, product_payload):
        del product_payload["name"]

        response = client.post("/api/products", json=product_payload)

        assert response.status_code == 422
        locations = [error["loc"] for error in response.json()["detail"]]
        assert ["body", "name"] in locations

    def test_boundary_lengths_are_accepted(self, client):
        created = _create(
            client,
            {
                "name": "n" * 200,
                "description": "d" * 1000,
                "price": 99999999.99,
                "imageUrl": "u" * 500,
            },
        )

        assert len(created["name"]) == 200
        assert created["price"] == 99999999.99


class TestReadProducts:
    def test_list_returns_all_products_in_id_order(self, client, product_payload):
        first = _create(client, {**product_payload, "name": "First"})
        second = _create(client, {**product_payload, "name": "Second"})

        response = client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == [first, second]

    def test_list_empty_catalog(self, client):
        response = client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_search(self, client, product_payload):
        _create(client, {**product_payload, "name": "Red Chair", "description": "Plastic"})
        _create(client, {**product_payload, "name": "Table", "description": "red oak top"})
        _create(client, {**product_payload, "name": "Lamp", "description": "Brass"})

        response = client.get("/api/products", params={"search": "RED"})

        assert [p["name"] for p in response.json()] == ["Red Chair", "Table"]

    def test_get_missing_product_returns_404(self, client):
        response = client.get("/api/products/4242")

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

    def test_non_integer_id_is_rejected(self, client):
        response = client.get("/api/products/abc")

        assert response.status_code == 422

    @pytest.mark.parametrize("term", ["_", "%"])
    def test_search_wildcards_match_literally(self, client, product_payload, term):
        _create(client, {**product_payload, "name": "Chair"})
        _create(client, {**product_payload, "name": "Lamp"})

        response = client.get("/api/products", params={"search": term})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize("product_id", ["0", "-1", "2147483648", "99999999999999999999"])
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_out_of_range_id_is_rejected(self, client, product_payload, method, product_id):
        response = client.request(
            method,
            f"/api/products/{product_id}",
            json=product_payload if method == "PUT" else None,
        )

        assert response.status_code == 422

    def test_largest_id_is_a_plain_miss(self, client):
        assert client.get("/api/products/2147483647").status_code == 404


class TestUpdateProduct:
    def test_update_persists_new_values(self, client, product_payload):
        created = _create(client, product_payload)
        changes = {
            "name": "Wireless Keyboard",
            "description": "Bluetooth keyboard",
            "price": 129.5,
            "imageUrl": None,
        }

        response = client.put(f"/api/products/{created['id']}", json=changes)

        assert response.status_code == 200
        assert response.json() == {"id": created["id"], **changes}
        assert client.get(f"/api/products/{created['id']}").json() == {
            "id": created["id"],
            **changes,
        }

    def test_update_with_matching_body_id(self, client, product_payload):
        created = _create(client, product_payload)

        response = client.put(
            f"/api/products/{created['id']}",
            json={**created, "name": "Renamed"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"

    def test_update_with_mismatched_body_id(self, client, product_payload):
        created = _create(client, product_payload)

        response = client.put(
            f"/api/products/{created['id']}",
            json={**created, "id": created["id"] + 1, "name": "Renamed"},
        )

        assert response.status_code == 400
        assert client.get(f"/api/products/{created['id']}").json() == created

    def test_update_missing_product_returns_404(self, client, product_payload):
        response = client.put("/api/products/777", json=product_payload)

        assert response.status_code == 404

    def test_update_validates_input(self, client, product_payload):
        created = _create(client, product_payload)

        response = client.put(
            f"/api/products/{created['id']}",
            json={**product_payload, "description": ""},
        )

        assert response.status_code == 422
        assert client.get(f"/api/products/{created['id']}").json() == created


class TestDeleteProduct:
    def test_delete_removes_product_from_list(self, client, product_payload):
        kept = _create(client, {**product_payload, "name": "Kept"})
        removed = _create(client, {**product_payload, "name": "Removed"})

        response = client.delete(f"/api/products/{removed['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get("/api/products").json() == [kept]
        assert client.get(f"/api/products/{removed['id']}").status_code == 404

    def test_delete_missing_product_returns_404(self, client):
        response = client.delete("/api/products/31337")

        assert response.status_code == 404

    def test_delete_twice(self, client, product_payload):
        created = _create(client, product_payload)

        assert client.delete(f"/api/products/{created['id']}").status_code == 204
        assert client.delete(f"/api/products/{created['id']}").status_code == 404


class TestRequestHandling:
    def test_request_id_is_echoed(self, client):
        response = client.get("/api/products", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client):
        response = client.get("/api/products")

        assert response.headers["X-Request-ID"]

    def test_security_headers(self, client):
        response = client.get("/api/products")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_unhandled_error_returns_500_with_request_id(self, client):
        class BrokenRepository:
            def list_all(self, search=None):
                raise RuntimeError("boom")

        client.app.dependency_overrides[get_product_repository] = BrokenRepository
        try:
            response = client.get("/api/products", headers={"X-Request-ID": "req-500"})
        finally:
            client.app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {
            "detail": "Internal Server Error",
            "request_id": "req-500",
        }

    @pytest.mark.parametrize(
        "origin",
        ["http://localhost:3000", "https://localhost:3000", "https://shop-preview.vercel.app"],
    )
    def test_cors_allows_frontend_origins(self, client, origin):
        response = client.options(
            "/api/products",
            headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == origin

    def test_cors_rejects_unknown_origin(self, client):
        response = client.get("/api/products", headers={"Origin": "https://evil.example"})

        assert "access-control-allow-origin" not in response.headers
