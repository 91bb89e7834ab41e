import io

import pytest


# =====================================================
# helpers
# =====================================================
def create_category(client, headers, name="Laptops"):
    resp = client.post("/api/categories", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def create_product(client, headers, category_id, serials=None, images=None, **extra):
    data = {"name": "ThinkPad X1", "description": "laptop", "price": "1999.99", "category_id": str(category_id)}
    data.update(extra)
    if serials is not None:
        data["serials"] = serials
    return client.post("/api/products", data=data, files=images or None, headers=headers)


def register(client, product_id, serial="SN1"):
    return client.post(
        "/api/warranty/register",
        json={
            "serial": serial,
            "product_id": product_id,
            "user_name": "Jan Kowalski",
            "user_email": "jan@example.com",
            "user_phone": "600100200",
        },
    )


@pytest.fixture
def category_id(client, admin_headers):
    return create_category(client, admin_headers)


@pytest.fixture
def product_id(client, admin_headers, category_id):
    resp = create_product(client, admin_headers, category_id, serials='["SN1", "sn2"]')
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


# =====================================================
# health & auth
# =====================================================
def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "db": 2}


def test_login_issues_usable_token(client, db):
    from warranty_hub.services.auth_service import AuthService

    AuthService(db).ensure_admin("admin@example.com", "hunter2")

    resp = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "hunter2"})
    assert resp.status_code == 200
    token = resp.json()["token"]

    resp = client.get("/api/warranty/admin", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


def test_login_with_wrong_password(client, db):
    from warranty_hub.services.auth_service import AuthService

    AuthService(db).ensure_admin("admin@example.com", "hunter2")

    resp = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["error"] == "unauthorized"


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/api/categories"),
        ("delete", "/api/categories/1"),
        ("post", "/api/subcategories"),
        ("post", "/api/products"),
        ("delete", "/api/products/1"),
        ("get", "/api/products/1/serials"),
        ("post", "/api/products/1/serials/bulk"),
        ("get", "/api/warranty/admin"),
        ("put", "/api/warranty/admin/1"),
        ("get", "/api/contact"),
    ],
)
def test_admin_routes_require_token(client, method, path):
    resp = getattr(client, method)(path)
    assert resp.status_code == 401


def test_garbage_token_is_rejected(client):
    resp = client.get("/api/warranty/admin", headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["message"] == "Invalid or expired token"


# =====================================================
# catalog
# =====================================================
def test_category_crud(client, admin_headers):
    cid = create_category(client, admin_headers, "Audio")

    assert client.get(f"/api/categories/{cid}").json()["name"] == "Audio"
    resp = client.put(f"/api/categories/{cid}", json={"name": "Hi-Fi"}, headers=admin_headers)
    assert resp.json()["name"] == "Hi-Fi"
    assert client.delete(f"/api/categories/{cid}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/categories/{cid}").status_code == 404


def test_duplicate_category_name(client, admin_headers, category_id):
    resp = client.post("/api/categories", json={"name": "Laptops"}, headers=admin_headers)
    assert resp.status_code == 409


def test_category_with_products_cannot_be_deleted(client, admin_headers, category_id, product_id):
    resp = client.delete(f"/api/categories/{category_id}", headers=admin_headers)

    assert resp.status_code == 409
    assert "still assigned to this category" in resp.json()["detail"]["message"]
    assert client.get(f"/api/categories/{category_id}").status_code == 200


def test_subcategories(client, admin_headers, category_id):
    resp = client.post("/api/subcategories", json={"name": "Gaming", "category_id": category_id}, headers=admin_headers)
    assert resp.status_code == 201
    sid = resp.json()["id"]

    listed = client.get("/api/subcategories").json()
    assert listed[0]["category_name"] == "Laptops"

    resp = client.put(
        f"/api/subcategories/{sid}", json={"name": "Esports", "category_id": category_id}, headers=admin_headers
    )
    assert resp.json()["name"] == "Esports"
    assert client.delete(f"/api/subcategories/{sid}", headers=admin_headers).status_code == 204


# =====================================================
# products
# =====================================================
def test_create_product_with_images(client, admin_headers, category_id, image_store):
    images = [
        ("images", ("front.png", io.BytesIO(b"\x89PNG..."), "image/png")),
        ("images", ("back.jpg", io.BytesIO(b"\xff\xd8..."), "image/jpeg")),
    ]
    resp = create_product(client, admin_headers, category_id, serials='["a1"]', images=images)
    assert resp.status_code == 201, resp.text

    product = client.get(f"/api/products/{resp.json()['id']}").json()
    assert product["quantity"] == 1
    assert product["category_name"] == "Laptops"
    assert product["images"] == [
        "https://signed.test/products/1-front.png?ttl=3600",
        "https://signed.test/products/2-back.jpg?ttl=3600",
    ]
    assert len(image_store.objects) == 2


def test_create_product_rejects_non_images(client, admin_headers, category_id, image_store):
    images = [("images", ("notes.txt", io.BytesIO(b"hello"), "text/plain"))]
    resp = create_product(client, admin_headers, category_id, images=images)
    assert resp.status_code == 400
    assert image_store.objects == {}


@pytest.mark.parametrize("serials", ["not json", '{"a": 1}', "[1, 2]"])
def test_create_product_invalid_serials_field(client, admin_headers, category_id, serials):
    resp = create_product(client, admin_headers, category_id, serials=serials)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid serials format"


def test_create_product_duplicate_serials_in_batch(client, admin_headers, category_id):
    resp = create_product(client, admin_headers, category_id, serials='["ABC123", "abc123"]')

    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "duplicate_in_batch"
    assert resp.json()["detail"]["codes"] == ["ABC123"]
    assert client.get("/api/products").json() == []


def test_create_product_unknown_category(client, admin_headers):
    resp = create_product(client, admin_headers, 123)
    assert resp.status_code == 404


def test_update_product_replaces_serials(client, admin_headers, category_id, product_id):
    resp = client.put(
        f"/api/products/{product_id}",
        data={"name": "X1 Carbon", "price": "2099.00", "category_id": str(category_id), "serials": '["N1"]'},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"id": product_id}

    product = client.get(f"/api/products/{product_id}").json()
    assert product["name"] == "X1 Carbon"
    assert product["quantity"] == 1
    serials = client.get(f"/api/products/{product_id}/serials", headers=admin_headers).json()
    assert [s["serial"] for s in serials["serials"]] == ["N1"]


def test_delete_product(client, admin_headers, product_id):
    resp = client.delete(f"/api/products/{product_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"product_name": "ThinkPad X1"}
    assert client.get(f"/api/products/{product_id}").status_code == 404


def test_delete_product_with_accepted_warranty(client, admin_headers, product_id):
    reg_id = register(client, product_id).json()["registration_id"]
    client.put(f"/api/warranty/admin/{reg_id}", json={"status": "accepted"}, headers=admin_headers)

    resp = client.delete(f"/api/products/{product_id}", headers=admin_headers)

    assert resp.status_code == 409
    assert client.get(f"/api/products/{product_id}").status_code == 200
    assert len(client.get("/api/warranty/admin", headers=admin_headers).json()) == 1


# =====================================================
# serials
# =====================================================
def test_serial_listing_with_statistics(client, admin_headers, product_id):
    register(client, product_id, "SN2")

    body = client.get(f"/api/products/{product_id}/serials", headers=admin_headers).json()

    assert body["statistics"] == {"total": 2, "used": 1, "available": 1}
    by_code = {s["serial"]: s for s in body["serials"]}
    assert by_code["SN2"]["status"] == "registered"
    assert by_code["SN1"]["status"] == "available"


def test_add_serials(client, admin_headers, product_id):
    resp = client.post(f"/api/products/{product_id}/serials", json={"serials": ["sn3", " SN4 "]}, headers=admin_headers)

    assert resp.status_code == 201
    assert resp.json() == {"message": "Successfully added 2 serial numbers", "added": 2, "serials": ["SN3", "SN4"]}
    assert client.get(f"/api/products/{product_id}").json()["quantity"] == 4


def test_add_serials_invalid_format(client, admin_headers, product_id):
    resp = client.post(f"/api/products/{product_id}/serials", json={"serials": ["XYZ-1"]}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"]["codes"] == ["XYZ-1"]
    assert client.get(f"/api/products/{product_id}").json()["quantity"] == 2


def test_add_serials_conflict(client, admin_headers, product_id):
    resp = client.post(f"/api/products/{product_id}/serials", json={"serials": ["SN1"]}, headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["detail"]["codes"] == ["SN1"]


def test_add_serials_limits(client, admin_headers, product_id):
    empty = client.post(f"/api/products/{product_id}/serials", json={"serials": []}, headers=admin_headers)
    assert empty.status_code == 400
    assert empty.json()["detail"] == "Serials array is required and cannot be empty"

    too_many = [f"S{i}" for i in range(101)]
    resp = client.post(f"/api/products/{product_id}/serials", json={"serials": too_many}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot add more than 100 serials at once"


def test_bulk_import_from_csv(client, admin_headers, product_id):
    resp = client.post(
        f"/api/products/{product_id}/serials/bulk",
        json={"csvData": "b1,b2;b3\nb4\r\n"},
        headers=admin_headers,
    )

    assert resp.status_code == 201
    assert resp.json()["message"] == "Bulk import successful: 4 serials added"
    assert client.get(f"/api/products/{product_id}").json()["quantity"] == 6


def test_bulk_import_without_serials(client, admin_headers, product_id):
    resp = client.post(f"/api/products/{product_id}/serials/bulk", json={"csvData": " ,;\n"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No valid serials provided"


def test_edit_and_delete_serial(client, admin_headers, product_id):
    serials = client.get(f"/api/products/{product_id}/serials", headers=admin_headers).json()["serials"]
    sid = next(s["id"] for s in serials if s["serial"] == "SN1")

    resp = client.put(f"/api/products/{product_id}/serials/{sid}", json={"serial": "sn9"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["new_serial"] == "SN9"

    resp = client.delete(f"/api/products/{product_id}/serials/{sid}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Serial number 'SN9' deleted successfully", "deleted": "SN9"}
    assert client.get(f"/api/products/{product_id}").json()["quantity"] == 1


def test_delete_registered_serial_is_refused(client, admin_headers, product_id):
    register(client, product_id, "SN1")
    serials = client.get(f"/api/products/{product_id}/serials", headers=admin_headers).json()["serials"]
    sid = next(s["id"] for s in serials if s["serial"] == "SN1")

    resp = client.delete(f"/api/products/{product_id}/serials/{sid}", headers=admin_headers)
    assert resp.status_code == 409


def test_check_serial(client, product_id):
    assert client.get("/api/serials/check/FREE1").json() == {"available": True, "exists": False, "details": None}

    body = client.get("/api/serials/check/sn1").json()
    assert body["exists"] is True
    assert body["details"]["product_id"] == product_id


# =====================================================
# warranty
# =====================================================
def test_validate_serial(client, product_id):
    resp = client.get("/api/warranty/validate/sn1")
    assert resp.status_code == 200
    assert resp.json()["product_id"] == product_id
    assert client.get("/api/warranty/validate/NOPE").status_code == 404


def test_register_and_reregister(client, product_id, notifier):
    resp = register(client, product_id)
    assert resp.status_code == 201
    assert resp.json()["message"] == "Warranty registered"
    assert notifier.sent == [
        (
            "warranty_registered",
            {
                "user_name": "Jan Kowalski",
                "user_email": "jan@example.com",
                "serial": "SN1",
                "product_name": "ThinkPad X1",
            },
        )
    ]

    again = register(client, product_id)
    assert again.status_code == 409
    assert again.json()["detail"]["error"] == "already_registered"
    assert client.get("/api/warranty/validate/SN1").status_code == 409


def test_register_validates_payload(client, product_id):
    resp = client.post("/api/warranty/register", json={"serial": "SN1", "product_id": product_id})
    assert resp.status_code == 422


def test_reject_frees_serial_and_notifies(client, admin_headers, product_id, notifier):
    reg_id = register(client, product_id).json()["registration_id"]

    resp = client.put(f"/api/warranty/admin/{reg_id}", json={"status": "rejected"}, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Updated", "id": reg_id, "status": "rejected"}
    assert notifier.sent[-1] == (
        "warranty_status_changed",
        {"status": "rejected", "user_name": "Jan Kowalski", "user_email": "jan@example.com", "serial": "SN1"},
    )
    assert client.get("/api/warranty/validate/SN1").status_code == 200


def test_invalid_status(client, admin_headers, product_id):
    reg_id = register(client, product_id).json()["registration_id"]
    resp = client.put(f"/api/warranty/admin/{reg_id}", json={"status": "maybe"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "invalid_status"


def test_delete_accepted_registration_frees_serial(client, admin_headers, product_id):
    reg_id = register(client, product_id).json()["registration_id"]
    client.put(f"/api/warranty/admin/{reg_id}", json={"status": "accepted"}, headers=admin_headers)

    resp = client.delete(f"/api/warranty/admin/{reg_id}", headers=admin_headers)

    assert resp.status_code == 204
    assert client.get("/api/warranty/validate/SN1").status_code == 200
    assert client.delete(f"/api/warranty/admin/{reg_id}", headers=admin_headers).status_code == 404


# =====================================================
# contact
# =====================================================
def test_contact_flow(client, admin_headers, notifier):
    resp = client.post(
        "/api/contact",
        json={"name": "Ann", "email": "ann@example.com", "phone": "123", "message": "Where is my order?"},
    )
    assert resp.status_code == 201
    assert resp.json()["message"] == "Contact message received"
    assert notifier.sent[0][0] == "contact_received"

    messages = client.get("/api/contact", headers=admin_headers).json()
    assert [m["message"] for m in messages] == ["Where is my order?"]


def test_contact_requires_all_fields(client):
    resp = client.post("/api/contact", json={"name": "Ann", "email": "ann@example.com"})
    assert resp.status_code == 422


def test_unexpected_error_has_uniform_body(client, monkeypatch):
    from fastapi.testclient import TestClient

    from warranty_hub.main import app
    from warranty_hub.services.category_service import CategoryService

    def broken(self):
        raise RuntimeError("connection to server at 10.0.0.5 failed")

    monkeypatch.setattr(CategoryService, "list_categories", broken)

    resp = TestClient(app, raise_server_exceptions=False).get("/api/categories")

    assert resp.status_code == 500
    assert resp.json() == {"detail": {"error": "server_error", "message": "Server error"}}
