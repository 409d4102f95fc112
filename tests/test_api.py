"""HTTP boundary: authentication, role checks and error rendering."""
import pytest

from app.models.item import ItemStatus

PASSWORD = "secret123"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_login_and_me(client, admin):
    response = client.post("/api/auth/login", data={"username": "manager", "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == "manager"
    assert response.json()["role"] == "ADMIN"


def test_login_with_wrong_password(client, admin):
    response = client.post("/api/auth/login", data={"username": "manager", "password": "nope"})
    assert response.status_code == 401


def test_requests_without_token_are_rejected(client):
    assert client.get("/api/inventory/").status_code == 401


def test_employee_cannot_create_items(client, employee, catalogue, auth_headers):
    response = client.post(
        "/api/inventory/",
        json={
            "product_model_id": catalogue["product_model"].id,
            "supplier_id": catalogue["supplier"].id,
            "serial_number": "API-1",
        },
        headers=auth_headers(employee),
    )
    assert response.status_code == 403


def test_only_super_admin_voids_sales(client, admin, super_admin, catalogue, make_item, auth_headers):
    item = make_item()
    response = client.post(
        "/api/sales/",
        json={"customer_id": catalogue["customer"].id, "inventory_item_ids": [item.id]},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    sale = response.json()
    assert sale["total"] == pytest.approx(107.0)
    assert sale["items_sold"][0]["status"] == ItemStatus.SOLD.value

    response = client.patch(f"/api/sales/{sale['id']}/void", headers=auth_headers(admin))
    assert response.status_code == 403

    response = client.patch(f"/api/sales/{sale['id']}/void", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert response.json()["status"] == "VOIDED"

    response = client.patch(f"/api/sales/{sale['id']}/void", headers=auth_headers(super_admin))
    assert response.status_code == 400
    assert "already been voided" in response.json()["detail"]


def test_status_conflict_renders_as_400(client, admin, catalogue, make_item, auth_headers):
    item = make_item()
    response = client.patch(f"/api/inventory/{item.id}/unreserve", headers=auth_headers(admin))
    assert response.status_code == 400
    assert "RESERVED" in response.json()["detail"]


def test_missing_record_renders_as_404(client, admin, auth_headers):
    response = client.get("/api/sales/999", headers=auth_headers(admin))
    assert response.status_code == 404
    assert response.json() == {"detail": "Sale not found."}


def test_duplicate_customer_code_renders_unique_message(client, admin, catalogue, auth_headers):
    response = client.post(
        "/api/customers/",
        json={"customer_code": "CUS-1", "name": "Someone Else"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400
    assert "must be unique" in response.json()["detail"]
    assert "customer_code" in response.json()["detail"]


def test_deleting_linked_record_renders_integrity_message(client, admin, catalogue, auth_headers):
    response = client.delete(
        f"/api/categories/{catalogue['category'].id}",
        headers=auth_headers(admin),
    )
    assert response.status_code == 400
    assert "still linked" in response.json()["detail"]


def test_borrow_and_return_over_http(client, admin, catalogue, make_item, auth_headers):
    first, second = make_item(), make_item()
    response = client.post(
        "/api/borrowings/",
        json={"customer_id": catalogue["customer"].id, "inventory_item_ids": [first.id, second.id]},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    borrowing = response.json()
    assert borrowing["total_item_count"] == 2
    assert borrowing["returned_item_count"] == 0

    response = client.patch(
        f"/api/borrowings/{borrowing['id']}/return",
        json={"item_ids": [first.id]},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "PARTIALLY_RETURNED"
    assert response.json()["returned_item_count"] == 1


def test_item_history_endpoint(client, employee, make_item, auth_headers):
    item = make_item()
    response = client.get(f"/api/history/{item.id}", headers=auth_headers(employee))
    assert response.status_code == 200
    body = response.json()
    assert body["item"]["id"] == item.id
    assert [event["event_type"] for event in body["events"]] == ["CREATE"]


def test_login_returns_role(client, employee):
    response = client.post("/api/auth/login", data={"username": "staff", "password": PASSWORD})
    assert response.status_code == 200
    assert response.json()["role"] == "EMPLOYEE"


def test_company_profile_defaults_then_update(client, admin, employee, auth_headers):
    response = client.get("/api/company-profile/", headers=auth_headers(employee))
    assert response.status_code == 200
    assert response.json()["name"] == "Your Company Name"

    response = client.put(
        "/api/company-profile/", json={"tax_id": "TAX-42"}, headers=auth_headers(employee)
    )
    assert response.status_code == 403

    response = client.put(
        "/api/company-profile/",
        json={"name": "Acme Networks", "tax_id": "TAX-42"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Acme Networks"

    response = client.get("/api/company-profile/", headers=auth_headers(employee))
    assert response.json()["tax_id"] == "TAX-42"
    assert response.json()["address_line1"] == "123 Your Street, Your City"


def test_asset_views_for_employee_and_super_admin(
    client, admin, super_admin, employee, make_asset, auth_headers
):
    asset = make_asset()
    response = client.post(
        "/api/assignments/",
        json={"assignee_id": employee.id, "inventory_item_ids": [asset.id]},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    assert response.json()["assignee"]["display_name"] == "Staff"

    response = client.get("/api/users/me/assets", headers=auth_headers(employee))
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [asset.id]

    response = client.get(f"/api/users/{employee.id}/assets", headers=auth_headers(employee))
    assert response.status_code == 403

    response = client.get(
        f"/api/users/{employee.id}/assets?active_only=true", headers=auth_headers(super_admin)
    )
    assert response.status_code == 200
    records = response.json()
    assert records[0]["item"]["asset_code"] == asset.asset_code
    assert records[0]["returned_at"] is None


def test_customer_activity_endpoints(client, admin, employee, catalogue, make_item, auth_headers):
    customer_id = catalogue["customer"].id
    first, second = make_item(), make_item()
    response = client.post(
        "/api/borrowings/",
        json={"customer_id": customer_id, "inventory_item_ids": [first.id, second.id]},
        headers=auth_headers(admin),
    )
    borrowing_id = response.json()["id"]
    client.patch(
        f"/api/borrowings/{borrowing_id}/return", json={"item_ids": [first.id]}, headers=auth_headers(admin)
    )

    response = client.get(f"/api/customers/{customer_id}/history", headers=auth_headers(employee))
    assert response.status_code == 200
    assert [(e["type"], e["record_id"]) for e in response.json()] == [("BORROWING", borrowing_id)]

    response = client.get(f"/api/customers/{customer_id}/active-borrowings", headers=auth_headers(employee))
    assert [b["id"] for b in response.json()] == [borrowing_id]

    response = client.get(f"/api/customers/{customer_id}/returned-history", headers=auth_headers(employee))
    body = response.json()
    assert [entry["item"]["id"] for entry in body] == [first.id]
    assert body[0]["borrowing_id"] == borrowing_id

    response = client.get("/api/customers/9999/history", headers=auth_headers(employee))
    assert response.status_code == 404


def test_user_search_and_password_rules(client, super_admin, employee, auth_headers):
    response = client.get("/api/users/?search=staff", headers=auth_headers(super_admin))
    assert [user["username"] for user in response.json()] == ["staff"]

    response = client.post(
        "/api/users/",
        json={"username": "newbie", "email": "newbie@example.com", "password": "123"},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 422
