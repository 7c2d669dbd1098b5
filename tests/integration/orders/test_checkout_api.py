"""Integration tests for POST /api/v1/orders/ and /api/v1/orders/pos/."""

from __future__ import annotations

from uuid import uuid4

import pytest
from django.core import mail

from modules.orders.models import Order
from modules.products.constants import ProductStatus

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


class TestGuestCheckout:
    def test_creates_order(self, api_client, product, checkout_payload):
        response = api_client.post(URL, checkout_payload((product, 2)), format="json")

        assert response.status_code == 201
        data = response.data
        assert data["order_number"].startswith("CS")
        assert data["status"] == "pending"
        assert data["payment_status"] == "pending"
        assert data["order_type"] == "online"
        assert data["user_id"] is None
        assert data["subtotal"] == "400.00"
        assert data["tax_amount"] == "72.00"
        assert data["shipping_cost"] == "50.00"
        assert data["total_amount"] == "522.00"

    def test_customer_block(self, api_client, product, checkout_payload):
        data = api_client.post(URL, checkout_payload((product, 1)), format="json").data

        assert data["customer"] == {
            "name": "Priya Raman",
            "email": "priya@example.com",
            "phone": "9876500002",
            "address": {
                "street": "12 Car Street",
                "city": "Madurai",
                "state": "Tamil Nadu",
                "zip_code": "625001",
                "country": "India",
            },
        }

    def test_items_and_history(self, api_client, product, checkout_payload):
        data = api_client.post(URL, checkout_payload((product, 3)), format="json").data

        [item] = data["items"]
        assert item["product_id"] == product.id
        assert item["product_name"] == "Flower Pot Big"
        assert item["product_sku"] == "SKU-001"
        assert item["quantity"] == 3
        assert item["unit_price"] == "200.00"
        assert item["subtotal"] == "600.00"
        assert [h["notes"] for h in data["status_history"]] == ["Order created"]

    def test_stock_taken(self, api_client, product, checkout_payload):
        api_client.post(URL, checkout_payload((product, 5)), format="json")
        product.refresh_from_db()
        assert product.stock_quantity == 45
        assert product.sales == 5

    def test_logged_in_customer_is_linked(
        self, customer_client, customer_user, product, checkout_payload
    ):
        response = customer_client.post(URL, checkout_payload((product, 1)), format="json")
        assert response.data["user_id"] == customer_user.id

    def test_admin_notified(
        self, api_client, product, checkout_payload, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.post(URL, checkout_payload((product, 1)), format="json")

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["admin@crackershop.com"]
        assert response.data["order_number"] in mail.outbox[0].subject


class TestCheckoutWithCoupon:
    def test_discount_applied(self, api_client, product, make_coupon, checkout_payload):
        make_coupon()

        response = api_client.post(
            URL, checkout_payload((product, 5), coupon_code="diwali10"), format="json"
        )

        assert response.status_code == 201
        assert response.data["coupon_code"] == "DIWALI10"
        assert response.data["discount_type"] == "percentage"
        assert response.data["discount_amount"] == "100.00"
        assert response.data["total_amount"] == "1062.00"

    def test_unknown_coupon(self, api_client, product, checkout_payload):
        response = api_client.post(
            URL, checkout_payload((product, 1), coupon_code="NOPE"), format="json"
        )

        assert response.status_code == 400
        assert response.data == {"detail": "Invalid coupon code."}
        product.refresh_from_db()
        assert product.stock_quantity == 50

    def test_coupon_not_applicable(self, api_client, product, make_coupon, checkout_payload):
        make_coupon(is_active=False)
        response = api_client.post(
            URL, checkout_payload((product, 1), coupon_code="DIWALI10"), format="json"
        )
        assert response.status_code == 400
        assert "not active" in response.data["detail"]


class TestCheckoutErrors:
    def test_insufficient_stock(self, api_client, make_product, checkout_payload):
        product = make_product(stock_quantity=2)

        response = api_client.post(URL, checkout_payload((product, 3)), format="json")

        assert response.status_code == 409
        assert Order.objects.count() == 0

    def test_unknown_product(self, api_client, checkout_payload):
        body = checkout_payload()
        body["items"] = [{"product_id": str(uuid4()), "quantity": 1}]

        response = api_client.post(URL, body, format="json")

        assert response.status_code == 404

    def test_inactive_product(self, api_client, make_product, checkout_payload):
        product = make_product(status=ProductStatus.INACTIVE)
        response = api_client.post(URL, checkout_payload((product, 1)), format="json")
        assert response.status_code == 400

    def test_duplicate_lines(self, api_client, product, checkout_payload):
        response = api_client.post(
            URL, checkout_payload((product, 1), (product, 2)), format="json"
        )
        assert response.status_code == 400
        assert "Duplicate product IDs" in response.data["detail"]

    def test_empty_items(self, api_client, checkout_payload):
        response = api_client.post(URL, checkout_payload(), format="json")
        assert response.status_code == 400
        assert "items" in response.data

    def test_missing_customer_fields(self, api_client, product, checkout_payload):
        body = checkout_payload((product, 1))
        del body["customer"]["phone"]
        body["customer"]["email"] = "not-an-email"

        response = api_client.post(URL, body, format="json")

        assert response.status_code == 400
        assert set(response.data["customer"]) == {"phone", "email"}

    @pytest.mark.parametrize(
        ("field", "length"), [("street", 256), ("city", 101), ("zip_code", 21)]
    )
    def test_address_field_too_long(
        self, api_client, product, checkout_payload, field, length
    ):
        body = checkout_payload((product, 1))
        body["customer"]["address"][field] = "x" * length

        response = api_client.post(URL, body, format="json")

        assert response.status_code == 400
        assert field in response.data["customer"]["address"]
        assert Order.objects.count() == 0

    def test_oversized_idempotency_key(self, api_client, product, checkout_payload):
        response = api_client.post(
            URL,
            checkout_payload((product, 1)),
            format="json",
            HTTP_IDEMPOTENCY_KEY="k" * 256,
        )
        assert response.status_code == 400
        assert Order.objects.count() == 0

    def test_zero_quantity(self, api_client, product, checkout_payload):
        response = api_client.post(URL, checkout_payload((product, 0)), format="json")
        assert response.status_code == 400


class TestIdempotency:
    def test_replay_returns_same_order(self, api_client, product, checkout_payload):
        body = checkout_payload((product, 2))

        first = api_client.post(URL, body, format="json", HTTP_IDEMPOTENCY_KEY="abc-123")
        second = api_client.post(URL, body, format="json", HTTP_IDEMPOTENCY_KEY="abc-123")

        assert first.status_code == second.status_code == 201
        assert first.data["id"] == second.data["id"]
        assert Order.objects.count() == 1
        product.refresh_from_db()
        assert product.stock_quantity == 48

    def test_without_key_creates_each_time(self, api_client, product, checkout_payload):
        body = checkout_payload((product, 1))
        api_client.post(URL, body, format="json")
        api_client.post(URL, body, format="json")
        assert Order.objects.count() == 2


class TestPos:
    def test_admin_counter_sale(self, admin_client, product, checkout_payload):
        response = admin_client.post(
            f"{URL}pos/", checkout_payload((product, 1), payment_method="cash"), format="json"
        )

        assert response.status_code == 201
        assert response.data["order_type"] == "pos"
        assert response.data["payment_status"] == "paid"
        assert response.data["payment_method"] == "cash"

    def test_customer_forbidden(self, customer_client, product, checkout_payload):
        response = customer_client.post(
            f"{URL}pos/", checkout_payload((product, 1)), format="json"
        )
        assert response.status_code == 403

    def test_anonymous_unauthorized(self, api_client, product, checkout_payload):
        response = api_client.post(f"{URL}pos/", checkout_payload((product, 1)), format="json")
        assert response.status_code == 401
