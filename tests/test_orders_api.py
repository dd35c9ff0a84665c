"""Tests for the orders API: reads, status changes and notifications."""

import pytest
from sqlalchemy import func, select

from conftest import RecordingNotifier, checkout_payload
from mye_backend.core.security import create_access_token
from mye_backend.models.order import OrderStatusHistory


@pytest.fixture
def place_order(client, make_product):
    """Check out one item and return (order_id, order_number)."""

    def _place(email="ayse@example.com", quantity=1):
        product_id = make_product(sku=f"SKU-{email}", quantity=50)
        items = [{"id": product_id, "name": "MCB 16A", "price": 100.0, "quantity": quantity}]
        data = client.post("/api/checkout", json=checkout_payload(items, email=email)).json()["data"]
        return data["orderId"], data["orderNumber"]

    return _place


def history_count(database, order_id):
    with database.session() as session:
        return session.scalar(
            select(func.count()).select_from(OrderStatusHistory).where(OrderStatusHistory.order_id == order_id)
        )


class TestReadOrders:
    def test_list_with_pagination(self, client, place_order):
        for i in range(3):
            place_order(email=f"c{i}@example.com")

        response = client.get("/api/orders", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["pagination"] == {
            "page": 1,
            "limit": 2,
            "total": 3,
            "totalPages": 2,
            "hasNextPage": True,
            "hasPrevPage": False,
        }

    def test_filter_by_email(self, client, place_order):
        place_order(email="one@example.com")
        place_order(email="two@example.com")

        body = client.get("/api/orders", params={"email": "two@example.com"}).json()

        assert [o["email"] for o in body["data"]] == ["two@example.com"]

    def test_filter_by_status(self, client, place_order):
        order_id, _ = place_order()
        place_order(email="other@example.com")
        client.patch(f"/api/orders/{order_id}/status", json={"status": "preparing"})

        body = client.get("/api/orders", params={"status": "preparing"}).json()

        assert [o["id"] for o in body["data"]] == [order_id]

    def test_get_order_detail(self, client, place_order):
        order_id, order_number = place_order()

        response = client.get(f"/api/orders/{order_id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["orderNumber"] == order_number
        assert data["firstName"] == "Ayse"
        assert data["deliveryAddress"]["city"] == "Istanbul"
        assert data["paymentInfo"]["paymentStatus"] == "completed"
        assert data["items"][0]["productName"] == "MCB 16A"
        assert data["statusHistory"][0]["newStatus"] == "order_received"

    def test_missing_order(self, client):
        response = client.get("/api/orders/999")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Order not found", "errorType": "OrderNotFoundError"}

    def test_status_definitions(self, client):
        data = client.get("/api/orders/statuses").json()["data"]

        assert [d["value"] for d in data] == [
            "order_received",
            "preparing",
            "shipped",
            "returned",
            "cancelled",
            "completed",
        ]
        assert data[0]["name"] == "Sipariş Alındı"
        assert data[0]["nameEn"] == "Order Received"

    def test_summary(self, client, place_order):
        first, _ = place_order()
        place_order(email="other@example.com")
        for status in ("preparing", "shipped", "completed"):
            client.patch(f"/api/orders/{first}/status", json={"status": status})

        data = client.get("/api/orders/summary").json()["data"]

        assert data["totalOrders"] == 2
        assert data["completedOrders"] == 1
        assert data["orderReceivedOrders"] == 1
        assert data["totalRevenue"] == 360.0


class TestChangeStatus:
    def test_change_by_id(self, client, database, place_order, notifier):
        order_id, order_number = place_order()

        response = client.patch(
            f"/api/orders/{order_id}/status",
            json={"status": "preparing", "notes": "Packing started"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == (
            f'Order #{order_number} status updated from "Sipariş Alındı" to "Hazırlanıyor"'
        )
        assert body["data"]["status"] == "preparing"
        latest = body["data"]["statusHistory"][0]
        assert latest["oldStatus"] == "order_received"
        assert latest["newStatus"] == "preparing"
        assert latest["changedBy"] == "admin"
        assert latest["notes"] == "Packing started"
        assert history_count(database, order_id) == 2

        assert len(notifier.events) == 1
        event = notifier.events[0]
        assert event.order_number == order_number
        assert event.email == "ayse@example.com"
        assert (event.old_status, event.new_status) == ("order_received", "preparing")

    def test_change_by_number(self, client, place_order):
        order_id, order_number = place_order()

        response = client.patch(f"/api/orders/by-number/{order_number}/status", json={"status": "cancelled"})

        assert response.status_code == 200
        assert response.json()["data"]["id"] == order_id
        assert response.json()["data"]["status"] == "cancelled"

    def test_full_lifecycle_history(self, client, place_order):
        order_id, _ = place_order()
        for status in ("preparing", "shipped", "returned", "completed"):
            assert client.patch(f"/api/orders/{order_id}/status", json={"status": status}).status_code == 200

        history = client.get(f"/api/orders/{order_id}/status-history").json()["data"]

        assert [h["newStatus"] for h in history] == [
            "completed",
            "returned",
            "shipped",
            "preparing",
            "order_received",
        ]

    def test_invalid_transition(self, client, database, place_order, notifier):
        order_id, _ = place_order()

        response = client.patch(f"/api/orders/{order_id}/status", json={"status": "shipped"})

        assert response.status_code == 400
        body = response.json()
        assert body["errorType"] == "InvalidStatusTransitionError"
        assert "Allowed transitions: preparing, cancelled" in body["error"]
        assert history_count(database, order_id) == 1
        assert notifier.events == []

    def test_same_status(self, client, place_order):
        order_id, _ = place_order()

        response = client.patch(f"/api/orders/{order_id}/status", json={"status": "order_received"})

        assert response.status_code == 400
        assert response.json()["error"] == "Order is already in this status"

    def test_terminal_status_is_final(self, client, place_order):
        order_id, _ = place_order()
        client.patch(f"/api/orders/{order_id}/status", json={"status": "cancelled"})

        response = client.patch(f"/api/orders/{order_id}/status", json={"status": "preparing"})

        assert response.status_code == 400
        assert response.json()["error"].endswith("Allowed transitions: none")

    @pytest.mark.parametrize("body", [{}, {"status": "lost"}])
    def test_unknown_status(self, client, place_order, body):
        order_id, _ = place_order()

        response = client.patch(f"/api/orders/{order_id}/status", json=body)

        assert response.status_code == 400
        assert response.json()["errorType"] == "UnknownStatusError"

    def test_missing_order_by_id(self, client):
        response = client.patch("/api/orders/424242/status", json={"status": "preparing"})

        assert response.status_code == 404

    def test_missing_order_by_number(self, client):
        response = client.patch("/api/orders/by-number/MYE-0-0/status", json={"status": "preparing"})

        assert response.status_code == 404
        assert response.json()["error"] == 'Order with number "MYE-0-0" not found'


class TestActor:
    def test_actor_from_header(self, client, place_order):
        order_id, _ = place_order()

        response = client.patch(
            f"/api/orders/{order_id}/status",
            json={"status": "preparing"},
            headers={"X-User-Id": "warehouse-3"},
        )

        assert response.json()["data"]["statusHistory"][0]["changedBy"] == "warehouse-3"

    def test_actor_from_token(self, client, settings, place_order):
        order_id, _ = place_order()
        token = create_access_token("manager-7", settings)

        response = client.patch(
            f"/api/orders/{order_id}/status",
            json={"status": "preparing"},
            headers={"Authorization": f"Bearer {token}", "X-User-Id": "ignored"},
        )

        assert response.json()["data"]["statusHistory"][0]["changedBy"] == "manager-7"

    def test_bad_token_rejected(self, client, database, place_order):
        order_id, _ = place_order()

        response = client.patch(
            f"/api/orders/{order_id}/status",
            json={"status": "preparing"},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": "Could not validate credentials",
            "errorType": "HTTPException",
        }
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert history_count(database, order_id) == 1


class TestNotifications:
    @pytest.fixture
    def notifier(self):
        return RecordingNotifier(fail=True)

    def test_notification_failure_does_not_affect_response(self, client, database, place_order):
        order_id, _ = place_order()

        response = client.patch(f"/api/orders/{order_id}/status", json={"status": "preparing"})

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "preparing"
        assert history_count(database, order_id) == 2
