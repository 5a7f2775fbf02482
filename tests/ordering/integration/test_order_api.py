"""Integration tests for Order API endpoints via TestClient."""

import pytest
from ordering.compliance.port import ComplianceStatus


@pytest.fixture()
def checked_out(client, as_user):
    """Check out a cart of 2 x prod-001 for user-001 and return the order id."""
    client.post("/cart/items", json={"product_id": "prod-001", "quantity": 2}, headers=as_user())
    response = client.post("/cart/checkout", headers=as_user())
    return response.json()["order"]["order_id"]


class TestOrderHistoryEndpoint:
    def test_empty_history(self, client, as_user):
        body = client.get("/orders", headers=as_user()).json()
        assert body["items"] == []
        assert body["pagination"] == {
            "total": 0,
            "page": 1,
            "limit": 10,
            "total_pages": 1,
            "has_next_page": False,
            "has_previous_page": False,
        }

    def test_history_lists_orders(self, client, as_user, checked_out):
        body = client.get("/orders", headers=as_user()).json()
        assert [item["order_id"] for item in body["items"]] == [checked_out]
        assert body["items"][0]["total"] == {"amount": 5000, "currency": "INR"}

    def test_history_pagination_params(self, client, as_user, checked_out):
        body = client.get("/orders", params={"page": 2, "limit": 500}, headers=as_user()).json()
        assert body["items"] == []
        assert body["pagination"]["page"] == 2
        assert body["pagination"]["limit"] == 100

    def test_history_is_per_user(self, client, as_user, checked_out):
        body = client.get("/orders", headers=as_user("user-002")).json()
        assert body["pagination"]["total"] == 0


class TestOrderDetailEndpoint:
    def test_detail(self, client, as_user, checked_out):
        response = client.get(f"/orders/{checked_out}", headers=as_user())
        assert response.status_code == 200
        body = response.json()
        assert body["order_id"] == checked_out
        assert body["status"] == "CONFIRMED"
        assert body["items"][0]["quantity"] == 2
        assert body["compliance"] is None

    def test_detail_with_compliance(self, client, as_user, compliance, checked_out):
        compliance.link_prescription(checked_out, "rx-100", ComplianceStatus.APPROVED)
        body = client.get(f"/orders/{checked_out}", headers=as_user()).json()
        assert body["compliance"]["status"] == "APPROVED"
        assert body["compliance"]["prescriptions"] == [{"id": "rx-100", "status": "APPROVED", "rejection_reason": None}]

    def test_unknown_order(self, client, as_user):
        response = client.get("/orders/missing", headers=as_user())
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ORDER_NOT_FOUND"

    def test_other_users_order(self, client, as_user, checked_out):
        response = client.get(f"/orders/{checked_out}", headers=as_user("user-002"))
        assert response.status_code == 403
        assert response.json()["error"] == {
            "code": "UNAUTHORIZED_ORDER_ACCESS",
            "message": "You do not have permission to access this order",
        }


class TestOrderTransitionEndpoints:
    def test_pay_then_cancel(self, client, as_user, checked_out):
        paid = client.post(f"/orders/{checked_out}/pay", headers=as_user())
        assert paid.status_code == 200
        assert paid.json()["order"]["status"] == "PAID"

        cancelled = client.post(f"/orders/{checked_out}/cancel", headers=as_user())
        assert cancelled.json()["order"]["status"] == "CANCELLED"
        assert cancelled.json()["events"][0]["type"] == "OrderCancelled"
        assert cancelled.json()["events"][0]["previous_status"] == "PAID"
        assert cancelled.json()["events"][0]["items"] == []

    def test_confirm_already_confirmed(self, client, as_user, checked_out):
        response = client.post(f"/orders/{checked_out}/confirm", headers=as_user())
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ORDER_ALREADY_CONFIRMED"

    def test_confirm_placed_order(self, client, as_user):
        client.post("/cart/items", json={"product_id": "prod-001"}, headers=as_user())
        order_id = client.post("/cart/place", headers=as_user()).json()["order"]["order_id"]

        body = client.post(f"/orders/{order_id}/confirm", headers=as_user()).json()
        assert body["order"]["status"] == "CONFIRMED"
        assert body["events"][0]["type"] == "OrderConfirmed"

    def test_pay_unconfirmed(self, client, as_user):
        client.post("/cart/items", json={"product_id": "prod-001"}, headers=as_user())
        order_id = client.post("/cart/place", headers=as_user()).json()["order"]["order_id"]
        response = client.post(f"/orders/{order_id}/pay", headers=as_user())
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ORDER_NOT_CONFIRMED"

    def test_cancel_twice(self, client, as_user, checked_out):
        client.post(f"/orders/{checked_out}/cancel", headers=as_user())
        response = client.post(f"/orders/{checked_out}/cancel", headers=as_user())
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ORDER_TERMINAL_STATE"
