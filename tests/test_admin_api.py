from copy import deepcopy
from datetime import datetime

import pytest

from storefront import main
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.theme import Theme
from tests.db_helpers import auth_headers, build_client, make_session, seed_products, seed_themes
from tests.fixtures_data import HAPPY_PATH_ORDER_PAYLOAD, HAPPY_PATH_THEME_FORM

ADMIN = auth_headers("admin-1", role="admin")
CUSTOMER = auth_headers("customer-1")


@pytest.fixture()
def db():
    session = make_session()
    seed_themes(session)
    seed_products(session)
    yield session
    main.app.dependency_overrides.clear()


@pytest.mark.parametrize(
    "path",
    [
        "/api/admin/themes",
        "/api/admin/orders",
        "/api/admin/revenue/summary",
        "/api/admin/settings/logo",
        "/internal/metrics/requests",
    ],
)
def test_admin_routes_require_admin_role(db, path):
    client = build_client(db)

    assert client.get(path).status_code == 401
    forbidden = client.get(path, headers=CUSTOMER)
    assert forbidden.status_code == 403
    assert forbidden.json() == {"detail": "Insufficient permissions"}
    assert client.get(path, headers=ADMIN).status_code == 200


def test_presets_and_pure_form_helpers(db):
    client = build_client(db)

    presets = client.get("/api/admin/themes/presets", headers=ADMIN).json()
    form = client.post("/api/admin/themes/apply-preset", json={"preset": "winter_season"}, headers=ADMIN)
    missing = client.post("/api/admin/themes/apply-preset", json={"preset": "monsoon"}, headers=ADMIN)
    slug = client.post("/api/admin/themes/generate-slug", json={"name": "Dark Premium!"}, headers=ADMIN)

    assert len(presets) == 7
    assert form.status_code == 200
    assert form.json()["slug"] == "winter_season"
    assert form.json()["primary_color"] == "#0369A1"
    assert missing.status_code == 404
    assert slug.json() == {"slug": "dark_premium"}


def test_theme_form_load_and_edit_routes(db):
    client = build_client(db)
    dark = db.query(Theme).filter(Theme.slug == "dark").one()

    loaded = client.get(f"/api/admin/themes/{dark.id}/form", headers=ADMIN)
    edited = client.post(
        "/api/admin/themes/form/edit",
        json={"form": loaded.json(), "css_variables": {"--color-primary": "#111827"}, "slug": "Dark  Night"},
        headers=ADMIN,
    )
    blank = client.post("/api/admin/themes/form/edit", json={"slug": "Winter Sale"}, headers=ADMIN)

    assert loaded.status_code == 200
    assert loaded.json()["slug"] == "dark"
    assert loaded.json()["css_variables"] == dark.css_variables
    assert edited.status_code == 200
    assert edited.json()["primary_color"] == "#111827"
    assert edited.json()["css_variables"]["--color-primary"] == "#111827"
    assert edited.json()["slug"] == "dark_night"
    assert blank.json()["slug"] == "winter_sale"
    assert blank.json()["primary_color"] == "#3B82F6"
    assert client.get("/api/admin/themes/9999/form", headers=ADMIN).status_code == 404
    db.expire_all()
    assert db.query(Theme.primary_color).filter(Theme.slug == "dark").scalar() == "#60A5FA"


def test_theme_crud_flow(db):
    client = build_client(db)

    created = client.post("/api/admin/themes", json=HAPPY_PATH_THEME_FORM, headers=ADMIN)
    duplicate = client.post("/api/admin/themes", json=HAPPY_PATH_THEME_FORM, headers=ADMIN)
    invalid = client.post("/api/admin/themes", json={**HAPPY_PATH_THEME_FORM, "slug": ""}, headers=ADMIN)

    assert created.status_code == 201
    assert duplicate.status_code == 500
    assert "slug already in use" in duplicate.json()["detail"]
    assert invalid.status_code == 422

    theme_id = created.json()["id"]
    toggled = client.post(f"/api/admin/themes/{theme_id}/toggle", headers=ADMIN)
    updated = client.put(
        f"/api/admin/themes/{theme_id}",
        json={**HAPPY_PATH_THEME_FORM, "name": "Ocean Night"},
        headers=ADMIN,
    )
    assert toggled.json()["is_active"] is False
    assert updated.json()["name"] == "Ocean Night"

    assert client.delete(f"/api/admin/themes/{theme_id}", headers=ADMIN).status_code == 204
    assert client.get(f"/api/admin/themes/{theme_id}", headers=ADMIN).status_code == 404


def test_default_theme_setting_drives_public_resolution(db):
    client = build_client(db)

    assert client.get("/api/admin/themes/default", headers=ADMIN).json() == {"slug": None}
    saved = client.put("/api/admin/themes/default", json={"slug": "noel_christmas"}, headers=ADMIN)
    missing = client.put("/api/admin/themes/default", json={"slug": "monsoon"}, headers=ADMIN)

    assert saved.json() == {"slug": "noel_christmas"}
    assert missing.status_code == 404
    assert client.get("/api/themes/current").json()["theme"]["slug"] == "noel_christmas"


def test_checkout_and_order_lifecycle(db):
    client = build_client(db)

    created = client.post("/api/orders", json=HAPPY_PATH_ORDER_PAYLOAD)
    assert created.status_code == 201
    order = created.json()
    assert order["status"] == "pending"
    assert order["total_amount"] == 620000
    assert order["order_items"][0]["subtotal"] == 300000

    approved = client.post(f"/api/admin/orders/{order['id']}/approve", headers=ADMIN)
    again = client.post(f"/api/admin/orders/{order['id']}/approve", headers=ADMIN)
    verified = client.post(f"/api/admin/orders/{order['id']}/verify", json={"notes": "bank transfer"}, headers=ADMIN)

    assert approved.json()["status"] == "approved"
    assert again.status_code == 409
    assert verified.json()["notes"] == "bank transfer"
    assert verified.json()["verified_at"] is not None
    assert db.query(Product.stock_quantity).filter(Product.id == 1).scalar() == 8

    summary = client.get("/api/admin/revenue/summary", headers=ADMIN).json()
    assert summary["total_verified_revenue"] == 620000
    assert summary["total_pending_revenue"] == 0

    unverified = client.post(f"/api/admin/orders/{order['id']}/unverify", headers=ADMIN)
    assert unverified.json()["verified_at"] is None
    assert client.get("/api/admin/revenue/summary", headers=ADMIN).json()["total_pending_revenue"] == 620000

    listed = client.get("/api/admin/orders", params={"status": "approved"}, headers=ADMIN).json()
    assert [row["id"] for row in listed] == [order["id"]]


def test_status_patch_and_reject(db):
    client = build_client(db)
    order_id = client.post("/api/orders", json=HAPPY_PATH_ORDER_PAYLOAD).json()["id"]

    rejected = client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "rejected"}, headers=ADMIN)
    verify = client.post(f"/api/admin/orders/{order_id}/verify", headers=ADMIN)

    assert rejected.json()["status"] == "rejected"
    assert verify.status_code == 409


def test_checkout_validation(db):
    client = build_client(db)
    blank_name = deepcopy(HAPPY_PATH_ORDER_PAYLOAD)
    blank_name["customer_name"] = "   "
    inactive = deepcopy(HAPPY_PATH_ORDER_PAYLOAD)
    inactive["items"] = [{"product_id": 3, "quantity": 1}]

    assert client.post("/api/orders", json=blank_name).status_code == 422
    response = client.post("/api/orders", json=inactive)
    assert response.status_code == 422
    assert response.json() == {"detail": "Product 3 is not available"}


def test_bulk_delete_confirmation_flow(db):
    client = build_client(db)
    db.add(Order(customer_name="Old", customer_phone="0900", total_amount=5, created_at=datetime(2024, 1, 10)))
    db.add(Order(customer_name="New", customer_phone="0900", total_amount=5, created_at=datetime(2024, 3, 10)))
    db.commit()
    body = {"start_date": "2024-01-01", "end_date": "2024-01-31"}

    unconfirmed = client.post("/api/admin/orders/bulk-delete", json=body, headers=ADMIN)
    confirmed = client.post("/api/admin/orders/bulk-delete", json={**body, "confirmation": "DELETE"}, headers=ADMIN)
    everything = client.post("/api/admin/orders/bulk-delete", json={"confirmation": "DELETE"}, headers=ADMIN)

    assert unconfirmed.status_code == 400
    assert unconfirmed.json() == {"detail": 'Type "DELETE" to confirm this deletion'}
    assert confirmed.json() == {"orders_deleted": 1, "items_deleted": 0}
    assert everything.status_code == 400
    assert db.query(Order).count() == 1


def test_revenue_by_period_and_top_products(db):
    client = build_client(db)
    order_id = client.post("/api/orders", json=HAPPY_PATH_ORDER_PAYLOAD).json()["id"]
    client.post(f"/api/admin/orders/{order_id}/approve", headers=ADMIN)

    periods = client.get("/api/admin/revenue/by-period", params={"period": "year"}, headers=ADMIN)
    bad_period = client.get("/api/admin/revenue/by-period", params={"period": "decade"}, headers=ADMIN)
    top = client.get("/api/admin/revenue/top-products", headers=ADMIN)

    assert periods.status_code == 200
    assert periods.json()[0]["revenue"] == 620000
    assert bad_period.status_code == 422
    assert top.json()[0] == {"product_id": 1, "name": "Silk Scarf", "total": 2}


def test_logo_settings_and_contact_routes(db):
    client = build_client(db)

    saved = client.put("/api/admin/settings/logo", json={"site_logo": "Lotus", "site_logo_url": "logos/l.png"}, headers=ADMIN)
    public = client.get("/api/settings/logo")
    versions = client.get("/api/settings/versions").json()["versions"]
    contact_missing = client.get("/api/contact")
    contact_saved = client.put("/api/admin/contact", json={"email": "shop@example.com"}, headers=ADMIN)

    assert saved.status_code == 200
    assert public.json() == {"site_logo": "Lotus", "site_logo_url": "logos/l.png", "favicon_url": None}
    assert versions.get("site_logo", 0) >= 1
    assert contact_missing.json() is None
    assert contact_saved.json()["email"] == "shop@example.com"
    assert client.get("/api/contact").json()["email"] == "shop@example.com"


def test_storage_resolve_route(db, monkeypatch):
    from storefront.core import config

    monkeypatch.setattr(config, "STORAGE_PUBLIC_BASE_URL", "https://cdn.example.com")
    monkeypatch.setattr(config, "STORAGE_ACCESS_KEY_ID", "")
    client = build_client(db)

    response = client.get("/api/storage/resolve", params={"path": "products/a.png"})

    assert response.json() == {
        "public_url": "https://cdn.example.com/storage/v1/object/public/project-images/products/a.png",
        "signed_url": None,
    }
