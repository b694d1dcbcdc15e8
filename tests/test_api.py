from tests.conftest import make_payload

MISSING_ID = "65a1f0c2e4b0a1b2c3d4e5f9"


def _create(client, **overrides):
    resp = client.post("/api/products", json=make_payload(**overrides))
    assert resp.status_code == 201
    return resp.json()["data"]


def test_root_describes_service(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["endpoints"]["createProduct"] == "POST /api/products"
    assert "Home & Garden" in body["categories"]


def test_unknown_route(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Route not found"}


def test_unsupported_method_is_not_found(client):
    resp = client.patch("/api/products")
    assert resp.status_code == 404


class TestCreate:

    def test_created(self, client):
        resp = client.post("/api/products", json=make_payload())
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Product created successfully"
        data = body["data"]
        assert data["totalStock"] == 15
        assert data["availableSizes"] == ["M", "L"]
        assert {"id", "createdAt", "updatedAt"} <= set(data)

    def test_missing_field(self, client):
        payload = make_payload()
        del payload["category"]
        resp = client.post("/api/products", json=payload)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please provide name, price, category, and variants"
        assert client.get("/api/products").json()["count"] == 0

    def test_invalid_category(self, client):
        resp = client.post("/api/products", json=make_payload(category="Gadgets"))
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["errors"] == ["Gadgets is not a valid category"]

    def test_empty_variants(self, client):
        resp = client.post("/api/products", json=make_payload(variants=[]))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Product must have at least one variant"

    def test_malformed_json(self, client):
        resp = client.post(
            "/api/products", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False


class TestRead:

    def test_list(self, client):
        _create(client, name="First")
        _create(client, name="Second")
        body = client.get("/api/products").json()
        assert body["count"] == 2
        assert [p["name"] for p in body["data"]] == ["Second", "First"]

    def test_get(self, client):
        created = _create(client)
        resp = client.get(f"/api/products/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == "Running Shoes"

    def test_get_missing(self, client):
        resp = client.get(f"/api/products/{MISSING_ID}")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Product not found"}

    def test_get_malformed_id(self, client):
        resp = client.get("/api/products/123")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid product id"

    def test_by_category(self, client):
        for i in range(3):
            _create(client, name=f"Gadget {i}", category="Electronics")
        for i, category in enumerate(["Apparel", "Books", "Toys", "Sports", "Footwear"]):
            _create(client, name=f"Other {i}", category=category)
        body = client.get("/api/products/category/Electronics").json()
        assert body["count"] == 3
        assert body["category"] == "Electronics"
        assert all(p["category"] == "Electronics" for p in body["data"])

    def test_by_category_with_space(self, client):
        _create(client, category="Home & Garden")
        body = client.get("/api/products/category/Home%20%26%20Garden").json()
        assert body["count"] == 1

    def test_by_category_none(self, client):
        resp = client.get("/api/products/category/Books")
        assert resp.status_code == 200
        assert resp.json()["data"] == []

    def test_by_color(self, client):
        _create(client, name="Tee", variants=[
            {"color": "Black", "size": "S", "stock": 1},
            {"color": "Black", "size": "M", "stock": 2},
        ])
        _create(client, name="Shoe", variants=[{"color": "Black", "size": "42", "stock": 1}])
        _create(client, name="Mat", variants=[{"color": "Pink", "size": "One", "stock": 1}])
        body = client.get("/api/products/by-color/Black").json()
        assert body["count"] == 2
        assert body["color"] == "Black"
        assert sorted(p["name"] for p in body["data"]) == ["Shoe", "Tee"]

    def test_variants_projection(self, client):
        created = _create(client)
        body = client.get(f"/api/products/{created['id']}/variants").json()
        assert body["productName"] == "Running Shoes"
        assert body["variantCount"] == 2
        assert [v["color"] for v in body["variants"]] == ["Red", "Blue"]

    def test_variants_projection_missing(self, client):
        assert client.get(f"/api/products/{MISSING_ID}/variants").status_code == 404


class TestUpdate:

    def test_update(self, client):
        created = _create(client)
        resp = client.put(f"/api/products/{created['id']}", json={"name": "Trail Shoes", "price": 130})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["name"] == "Trail Shoes"
        assert data["price"] == 130
        assert data["category"] == "Footwear"
        assert data["createdAt"] == created["createdAt"]

    def test_update_invalid(self, client):
        created = _create(client)
        resp = client.put(f"/api/products/{created['id']}", json={"price": -1})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Price cannot be negative"

    def test_update_missing(self, client):
        resp = client.put(f"/api/products/{MISSING_ID}", json=make_payload())
        assert resp.status_code == 404


class TestDelete:

    def test_delete(self, client):
        created = _create(client)
        resp = client.delete(f"/api/products/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Product deleted successfully", "data": {}}
        assert client.get(f"/api/products/{created['id']}").status_code == 404

    def test_delete_missing(self, client):
        assert client.delete(f"/api/products/{MISSING_ID}").status_code == 404


class TestVariants:

    def test_add_variant(self, client):
        created = _create(client)
        resp = client.post(
            f"/api/products/{created['id']}/variants",
            json={"color": "Black", "size": "S", "stock": 8},
        )
        assert resp.status_code == 200
        variants = resp.json()["data"]["variants"]
        assert len(variants) == 3
        assert variants[-1]["color"] == "Black"

    def test_add_invalid_variant(self, client):
        created = _create(client)
        resp = client.post(f"/api/products/{created['id']}/variants", json={"size": "S"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Color is required"

    def test_add_variant_missing_product(self, client):
        resp = client.post(f"/api/products/{MISSING_ID}/variants", json={"color": "Black", "size": "S"})
        assert resp.status_code == 404

    def test_update_stock(self, client):
        created = _create(client)
        target, other = created["variants"]
        resp = client.patch(
            f"/api/products/{created['id']}/variants/{target['id']}", json={"stock": 0}
        )
        assert resp.status_code == 200
        assert resp.json()["message"] == "Variant stock updated successfully"
        variants = resp.json()["data"]["variants"]
        assert variants[0]["stock"] == 0
        assert variants[1] == other
        assert resp.json()["data"]["totalStock"] == other["stock"]

    def test_update_stock_unknown_variant(self, client):
        created = _create(client)
        resp = client.patch(f"/api/products/{created['id']}/variants/{MISSING_ID}", json={"stock": 3})
        assert resp.status_code == 404
        assert resp.json()["message"] == "Variant not found"

    def test_update_stock_malformed_variant_id(self, client):
        created = _create(client)
        resp = client.patch(f"/api/products/{created['id']}/variants/xyz", json={"stock": 3})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid variant id"


def test_persistence_fault_is_server_error(client, repository, monkeypatch):
    def boom():
        raise RuntimeError("connection reset")

    monkeypatch.setattr(repository, "list_all", boom)
    resp = client.get("/api/products")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Server Error"}


def test_update_stock_with_upper_case_variant_id(client):
    created = _create(client)
    target = created["variants"][0]
    resp = client.patch(
        f"/api/products/{created['id']}/variants/{target['id'].upper()}", json={"stock": 3}
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["variants"][0]["stock"] == 3
