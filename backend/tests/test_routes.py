import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from shop_admin.api import deps
from shop_admin.core.security import create_access_token
from shop_admin.crud import crud_product
from shop_admin.db.session import get_db
from shop_admin.main import app
from shop_admin.services.admin_auth import AdminAuthService
from shop_admin.services.image_hash import compute_image_hash

from conftest import RecordingEmailService, make_png, to_data_uri


async def fake_db():
    yield None


@pytest.fixture
def admin():
    return SimpleNamespace(id=uuid.uuid4(), email="owner@example.com", role="admin", is_active=True)


@pytest.fixture
def client(admin, asset_store, upload_service, product_images):
    app.dependency_overrides[get_db] = fake_db
    app.dependency_overrides[deps.get_current_admin] = lambda: admin
    app.dependency_overrides[deps.get_asset_store] = lambda: asset_store
    app.dependency_overrides[deps.get_upload_service] = lambda: upload_service
    app.dependency_overrides[deps.get_product_images] = lambda: product_images
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    app.dependency_overrides[get_db] = fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(anonymous_client):
    resp = anonymous_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_admin_routes_require_a_token(anonymous_client):
    resp = anonymous_client.get("/api/dashboard/")
    assert resp.status_code == 401


def test_invalid_token_is_unauthorized(anonymous_client):
    resp = anonymous_client.get("/api/orders/getAll", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_non_admin_role_is_forbidden(anonymous_client):
    token = create_access_token(subject=str(uuid.uuid4()), role="user")
    resp = anonymous_client.get("/api/dashboard/", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied. Admin privileges required."


def test_upload_json_data_uri_then_duplicate(client, asset_store):
    raw = make_png("teal")
    first = client.post("/api/upload/image", json={"imageData": to_data_uri(raw), "filename": "teal.png"})
    second = client.post("/api/upload/image", json={"imageData": to_data_uri(raw)})

    assert first.status_code == 200
    body = first.json()
    assert body["storageKey"] == f"admin-panel/products/{compute_image_hash(raw)}"
    assert body["isDuplicate"] is False
    assert second.status_code == 200
    assert second.json()["isDuplicate"] is True
    assert second.json()["url"] == body["url"]
    assert len(asset_store.upload_calls) == 1


def test_upload_multipart_file(client, asset_store):
    raw = make_png("navy")
    resp = client.post("/api/upload/image", files={"image": ("navy.png", raw, "image/png")})
    assert resp.status_code == 200
    assert resp.json()["contentHash"] == compute_image_hash(raw)


def test_upload_multipart_rejects_non_images(client, asset_store):
    resp = client.post("/api/upload/image", files={"image": ("notes.txt", b"hello", "text/plain")})
    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "image"
    assert asset_store.upload_calls == []


def test_upload_json_rejects_plain_urls(client):
    resp = client.post("/api/upload/image", json={"imageData": "https://example.com/a.png"})
    assert resp.status_code == 400


def test_upload_without_image_data(client):
    resp = client.post("/api/upload/image", json={"filename": "x.png"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "imageData"


def test_upload_store_failure_is_bad_gateway(client, asset_store):
    asset_store.fail_upload = True
    resp = client.post("/api/upload/image", json={"imageData": to_data_uri(make_png())})
    assert resp.status_code == 502
    assert "remote store unavailable" in resp.json()["detail"]


def test_delete_image_by_storage_key(client, asset_store):
    asset_store.seed("admin-panel/products/abc")
    resp = client.delete("/api/upload/image/admin-panel/products/abc")
    assert resp.status_code == 200
    assert resp.json() == {"storageKey": "admin-panel/products/abc", "deleted": True, "result": "ok"}

    again = client.delete("/api/upload/image/admin-panel/products/abc")
    assert again.status_code == 404


def test_product_update_reports_cleanup(client, product_repo, asset_store):
    url_a = asset_store.seed("admin-panel/products/aaa")
    url_b = asset_store.seed("admin-panel/products/bbb")
    url_c = asset_store.seed("admin-panel/products/ccc")
    product = product_repo.add(
        images=[{"url": url_a, "alt": "A", "isPrimary": True}, {"url": url_b, "alt": "B", "isPrimary": False}]
    )

    resp = client.put(f"/api/products/update/{product.id}", json={"images": [url_b, {"url": url_c, "alt": "C"}]})

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Product updated successfully"
    assert [img["url"] for img in body["data"]["images"]] == [url_b, url_c]
    assert [img["isPrimary"] for img in body["data"]["images"]] == [True, False]
    assert [d["url"] for d in body["cleanup"]["deleted"]] == [url_a]
    assert body["cleanup"]["failed"] == []


def test_product_update_missing_product(client):
    resp = client.put(f"/api/products/update/{uuid.uuid4()}", json={"price": 10})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Product not found"


def test_product_delete_returns_cleanup(client, product_repo, asset_store):
    url_a = asset_store.seed("admin-panel/products/aaa")
    product = product_repo.add(images=[{"url": url_a, "alt": "A", "isPrimary": True}])

    resp = client.delete(f"/api/products/delete/{product.id}")

    assert resp.status_code == 200
    assert resp.json()["id"] == str(product.id)
    assert resp.json()["cleanup"]["deleted"][0]["storageKey"] == "admin-panel/products/aaa"
    assert product_repo.deleted == [product.id]


def test_product_create_validation_is_field_level(client):
    resp = client.post("/api/products/create", json={"description": "x", "category": "Kurta", "price": 10, "stock": 1})
    assert resp.status_code == 400
    fields = {error["field"] for error in resp.json()["detail"]}
    assert {"name", "material"} <= fields


def test_product_create_returns_created_product(client, product_repo):
    resp = client.post(
        "/api/products/create",
        json={
            "name": "Cotton Saree",
            "description": "Breathable cotton saree",
            "category": "Saree",
            "meterial": "Cotton",
            "price": 1499,
            "stock": 3,
            "images": ["https://store/v1/admin-panel/products/one.png"],
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["material"] == "Cotton"
    assert body["images"] == [
        {"url": "https://store/v1/admin-panel/products/one.png", "alt": "Product image 1", "thumbnail": None, "isPrimary": True}
    ]


def test_get_product_not_found(client, monkeypatch):
    async def missing(db, product_id):
        return None

    monkeypatch.setattr(crud_product, "get_product", missing)
    resp = client.get(f"/api/products/{uuid.uuid4()}")
    assert resp.status_code == 404


def test_forgot_password_does_not_reveal_accounts(anonymous_client, monkeypatch):
    class NoAdmins:
        async def get_admin_by_email(self, db, email):
            return None

    mailer = RecordingEmailService()
    app.dependency_overrides[deps.get_admin_auth] = lambda: AdminAuthService(mailer, repository=NoAdmins())
    resp = anonymous_client.post("/api/admin/forgot-password", json={"email": "ghost@example.com"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["message"] == "If the email exists, password reset instructions have been sent"
    assert mailer.sent == []


def test_order_filter_rejects_unknown_status(client):
    resp = client.get("/api/orders/getAll", params={"status": "Teleported"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "status"
