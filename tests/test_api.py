import base64

from fastapi.testclient import TestClient

from main import create_app
from repositories.memory import InMemoryFleetStore
from tests.conftest import ADMIN_ID, ADMIN_KEY

NEW_ORDER = {
    "items": ["12 Cases of Club Beer", "4 Cartons of Frytol Cooking Oil"],
    "pickup": {"address": "Tema", "lat": 5.6667, "lng": -0.0167},
    "destination": {"address": "Ho", "lat": 6.6119, "lng": 0.4713},
    "recipient_name": "Palace Supermarket",
    "recipient_phone": "+233 244 123 456",
    "payment_type": "Pay on Delivery",
    "product_price": 800.0,
    "delivery_fee": 500.0,
}


# Auth

def test_login_sets_session_cookie(client):
    response = client.post("/api/auth/login", json={"id": ADMIN_ID, "key": ADMIN_KEY})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == ADMIN_ID
    assert body["role"] == "admin"
    assert body["token_type"] == "bearer"
    assert "token" in response.cookies


def test_login_rejects_wrong_key(client):
    response = client.post("/api/auth/login", json={"id": ADMIN_ID, "key": "wrong"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_endpoints_require_authentication(client):
    assert client.get("/api/orders/").status_code == 401
    assert client.get("/api/sos/").status_code == 401

    response = client.get("/api/orders/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_cookie_session_is_accepted(client):
    client.post("/api/auth/login", json={"id": ADMIN_ID, "key": ADMIN_KEY})

    response = client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.json() == {"id": ADMIN_ID, "name": "Admin", "role": "admin"}


# Orders

def test_list_seeded_orders_newest_first(auth_client):
    response = auth_client.get("/api/orders/")

    assert response.status_code == 200
    ids = [o["id"] for o in response.json()]
    assert len(ids) == 20
    assert ids[0] == "ORD-120"
    assert ids[-1] == "ORD-101"


def test_list_orders_filtered_by_driver_and_status(auth_client):
    response = auth_client.get("/api/orders/", params={"driver_id": "DRV-001", "status": "Moving"})

    assert [o["id"] for o in response.json()] == ["ORD-102"]


def test_get_unknown_order_is_404(auth_client):
    response = auth_client.get("/api/orders/ORD-999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Order not found"


def test_create_order(auth_client):
    response = auth_client.post("/api/orders/", json=NEW_ORDER)

    assert response.status_code == 201
    body = response.json()
    assert body["id"] == "ORD-121"
    assert body["status"] == "Pending"
    assert body["amount_to_collect"] == 1300.0
    assert body["completed_at"] is None
    assert "proof_payload" not in body


def test_create_order_validates_input(auth_client):
    response = auth_client.post("/api/orders/", json={**NEW_ORDER, "items": []})

    assert response.status_code == 422


def test_second_active_order_is_rejected(auth_client):
    response = auth_client.put("/api/orders/ORD-103/status", json={"status": "Moving"})

    assert response.status_code == 409
    assert "ORD-102" in response.json()["detail"]
    assert auth_client.get("/api/orders/ORD-103").json()["status"] == "Pending"


def test_finishing_active_order_unblocks_the_next(auth_client):
    delivered = auth_client.put("/api/orders/ORD-102/status", json={"status": "Delivered"})
    assert delivered.status_code == 200
    assert delivered.json()["completed_at"] is not None

    response = auth_client.put("/api/orders/ORD-103/status", json={"status": "Moving"})

    assert response.status_code == 200
    assert response.json()["status"] == "Moving"


def test_in_transit_is_accepted_as_moving(auth_client):
    response = auth_client.put("/api/orders/ORD-101/status", json={"status": "In Transit"})

    assert response.status_code == 200
    assert response.json()["status"] == "Moving"


def test_unknown_status_is_rejected(auth_client):
    response = auth_client.put("/api/orders/ORD-101/status", json={"status": "Lost"})

    assert response.status_code == 422


def test_returning_records_reason(auth_client):
    response = auth_client.put(
        "/api/orders/ORD-102/status",
        json={"status": "Returning", "return_reason": "RD"},
    )

    body = response.json()
    assert body["status"] == "Returning"
    assert body["return_reason"] == "Recipient Damaged"
    assert body["completed_at"] is not None


def test_assign_driver(auth_client):
    response = auth_client.post("/api/orders/ORD-101/assign", json={"driver_id": "DRV-004"})

    assert response.status_code == 200
    assert response.json()["driver_id"] == "DRV-004"
    assert auth_client.get("/api/drivers/DRV-004").json()["status"] == "On-trip"


def test_assign_unknown_driver_is_404(auth_client):
    response = auth_client.post("/api/orders/ORD-101/assign", json={"driver_id": "DRV-999"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Driver not found"


# Confirmation

def test_signature_completes_delivery(auth_client):
    response = auth_client.post(
        "/api/orders/ORD-102/confirm",
        json={"method": "SIGNATURE", "payload": "data:image/png;base64,c2lnbmVk"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Delivered"
    assert body["proof_method"] == "SIGNATURE"


def test_photo_documents_return_without_status_change(auth_client, settings):
    auth_client.put("/api/orders/ORD-102/status", json={"status": "Returning", "return_reason": "PF"})
    photo = base64.b64encode(b"\xff\xd8\xff\xe0jpeg").decode()

    response = auth_client.post("/api/orders/ORD-102/confirm", json={"method": "PHOTO", "payload": photo})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Returning"
    assert body["return_photo_url"] == "/uploads/returns/ORD-102-photo.jpg"
    assert auth_client.get(body["return_photo_url"]).content == b"\xff\xd8\xff\xe0jpeg"


def test_invalid_photo_is_rejected(auth_client):
    response = auth_client.post("/api/orders/ORD-102/confirm", json={"method": "PHOTO", "payload": "not base64!"})

    assert response.status_code == 400
    assert auth_client.get("/api/orders/ORD-102").json()["return_photo_url"] is None


# Drivers

def test_list_drivers(auth_client):
    response = auth_client.get("/api/drivers/")

    assert [d["id"] for d in response.json()] == ["DRV-001", "DRV-002", "DRV-003", "DRV-004"]


def test_unknown_driver_is_404(auth_client):
    assert auth_client.get("/api/drivers/DRV-999").status_code == 404


def test_driver_queue(auth_client):
    response = auth_client.get("/api/drivers/DRV-001/queue")

    entries = response.json()
    assert [e["order"]["id"] for e in entries] == ["ORD-102", "ORD-103", "ORD-104", "ORD-106", "ORD-107"]
    assert [e["actionable"] for e in entries] == [True, False, False, False, False]


def test_driver_history_holds_finished_orders(auth_client):
    response = auth_client.get("/api/drivers/DRV-001/history")

    statuses = {o["status"] for o in response.json()}
    assert response.json()
    assert statuses <= {"Delivered", "Cancelled", "Returning"}


# SOS

def test_sos_create_and_list(auth_client):
    first = auth_client.post("/api/sos/", json={"driver_id": "DRV-001", "problem_code": "FLOODING"})
    second = auth_client.post(
        "/api/sos/",
        json={"driver_id": "DRV-003", "problem_code": "ACCIDENT", "message": "Collision on N6"},
    )

    assert first.status_code == 201
    assert first.json()["driver_name"] == "Kofi Mensah"
    assert first.json()["message"] == "Requesting immediate assistance!"
    assert second.json()["severity"] == "critical"

    alerts = auth_client.get("/api/sos/").json()
    assert [a["id"] for a in alerts] == [second.json()["id"], first.json()["id"]]

    critical = auth_client.get("/api/sos/", params={"severity": "critical"}).json()
    assert [a["id"] for a in critical] == [second.json()["id"]]


def test_sos_rejects_unknown_problem_code(auth_client):
    response = auth_client.post("/api/sos/", json={"driver_id": "DRV-001", "problem_code": "ALIENS"})

    assert response.status_code == 422


def test_problem_codes(auth_client):
    codes = auth_client.get("/api/sos/problem-codes").json()

    assert set(codes) == {"critical", "blockage", "external-delay", "customer-issue"}
    assert "ACCIDENT" in codes["critical"]
    assert "GOODS_REFUSED" in codes["customer-issue"]


# Ambient

def test_health(client):
    response = client.get("/health")

    assert response.json() == {"status": "healthy", "storage": "memory", "database": "not configured"}


def test_security_headers_and_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Content-Security-Policy" in response.headers


def test_seeded_return_photo_is_served(auth_client):
    returns = auth_client.get("/api/orders/", params={"status": "Returning"}).json()

    response = auth_client.get(returns[0]["return_photo_url"])

    assert response.status_code == 200
    assert response.content.startswith(b"\xff\xd8")


def test_session_cookie_follows_app_settings(settings):
    settings.cookie_name = "fleet_session"
    settings.session_expire_minutes = 5
    client = TestClient(create_app(settings, store=InMemoryFleetStore()))

    response = client.post("/api/auth/login", json={"id": ADMIN_ID, "key": ADMIN_KEY})

    assert response.json()["expires_in"] == 300
    assert "fleet_session" in response.cookies
    assert "token" not in response.cookies
    assert client.get("/api/auth/me").status_code == 200

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_archived_orders(auth_client):
    response = auth_client.get("/api/orders/archived")

    assert response.status_code == 200
    orders = response.json()
    assert orders
    assert {o["status"] for o in orders} <= {"Delivered", "Cancelled"}
