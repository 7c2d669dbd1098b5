"""Integration tests for the Coupon API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.utils import timezone

from modules.coupons.models import Coupon

pytestmark = pytest.mark.integration

URL = "/api/v1/coupons/"
VALIDATE_URL = f"{URL}validate/"


def _window() -> dict:
    now = timezone.now()
    return {
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=14)).isoformat(),
    }


class TestValidate:
    def test_anonymous_can_validate(self, api_client, make_coupon):
        make_coupon()

        response = api_client.post(
            VALIDATE_URL, {"code": "diwali10", "order_amount": "1500.00"}, format="json"
        )

        assert response.status_code == 200
        assert response.data == {
            "code": "DIWALI10",
            "name": "Diwali 10%",
            "discount_type": "percentage",
            "value": "10.00",
            "discount": "150.00",
            "final_amount": "1350.00",
        }

    def test_validation_does_not_consume_usage(self, api_client, make_coupon):
        coupon = make_coupon(usage_limit=1)
        for _ in range(2):
            api_client.post(
                VALIDATE_URL, {"code": "DIWALI10", "order_amount": "500"}, format="json"
            )
        coupon.refresh_from_db()
        assert coupon.used_count == 0

    def test_unknown_code(self, api_client):
        response = api_client.post(
            VALIDATE_URL, {"code": "NOPE", "order_amount": "500"}, format="json"
        )
        assert response.status_code == 404
        assert response.data == {"detail": "Invalid coupon code."}

    def test_expired(self, api_client, make_coupon):
        now = timezone.now()
        make_coupon(start_date=now - timedelta(days=10), end_date=now - timedelta(days=1))

        response = api_client.post(
            VALIDATE_URL, {"code": "DIWALI10", "order_amount": "500"}, format="json"
        )

        assert response.status_code == 400
        assert "expired" in response.data["detail"].lower()

    def test_minimum_order_not_met(self, api_client, make_coupon):
        make_coupon(minimum_order_amount=Decimal("1000.00"))

        response = api_client.post(
            VALIDATE_URL, {"code": "DIWALI10", "order_amount": "999.99"}, format="json"
        )

        assert response.status_code == 400

    def test_items_outside_scope(self, api_client, make_coupon, make_product, product):
        coupon = make_coupon()
        coupon.applicable_products.set([product])
        other = make_product()

        response = api_client.post(
            VALIDATE_URL,
            {
                "code": "DIWALI10",
                "order_amount": "500",
                "items": [{"product_id": str(other.id), "quantity": 1}],
            },
            format="json",
        )

        assert response.status_code == 400

    def test_customer_already_used_coupon(
        self, api_client, make_coupon, product, checkout_payload
    ):
        make_coupon()
        api_client.post(
            "/api/v1/orders/",
            checkout_payload((product, 1), coupon_code="DIWALI10"),
            format="json",
        )

        response = api_client.post(
            VALIDATE_URL,
            {
                "code": "DIWALI10",
                "order_amount": "500",
                "customer_email": "priya@example.com",
            },
            format="json",
        )

        assert response.status_code == 400

    def test_malformed_customer_email(self, api_client, make_coupon):
        make_coupon()
        response = api_client.post(
            VALIDATE_URL,
            {"code": "DIWALI10", "order_amount": "500", "customer_email": "priya@"},
            format="json",
        )
        assert response.status_code == 400

    def test_missing_fields(self, api_client):
        response = api_client.post(VALIDATE_URL, {}, format="json")
        assert response.status_code == 400
        assert "code" in response.data
        assert "order_amount" in response.data


class TestAdminCrud:
    def test_create(self, admin_client, admin_user, category):
        response = admin_client.post(
            URL,
            {
                "code": "newyear",
                "name": "New Year 100 off",
                "discount_type": "fixed",
                "value": "100.00",
                "minimum_order_amount": "1000.00",
                "applicable_categories": [str(category.id)],
                **_window(),
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["code"] == "NEWYEAR"
        assert response.data["is_valid"] is True
        assert response.data["applicable_categories"] == [category.id]
        assert Coupon.objects.get(code="NEWYEAR").created_by == admin_user

    def test_create_duplicate_conflict(self, admin_client, make_coupon):
        make_coupon()
        response = admin_client.post(
            URL,
            {
                "code": "DIWALI10",
                "name": "Again",
                "discount_type": "percentage",
                "value": "5",
                **_window(),
            },
            format="json",
        )
        assert response.status_code == 409

    def test_create_percentage_over_100(self, admin_client):
        response = admin_client.post(
            URL,
            {
                "code": "TOOMUCH",
                "name": "Too much",
                "discount_type": "percentage",
                "value": "120",
                **_window(),
            },
            format="json",
        )
        assert response.status_code == 400

    def test_create_with_unknown_scope_ids(self, admin_client, category):
        ghost = uuid4()
        response = admin_client.post(
            URL,
            {
                "code": "GHOST",
                "name": "Ghost scope",
                "discount_type": "fixed",
                "value": "50",
                "applicable_categories": [str(category.id), str(ghost)],
                **_window(),
            },
            format="json",
        )

        assert response.status_code == 400
        assert str(ghost) in response.data["detail"]
        assert not Coupon.objects.filter(code="GHOST").exists()

    def test_update_with_unknown_scope_ids(self, admin_client, make_coupon):
        coupon = make_coupon()
        response = admin_client.patch(
            f"{URL}{coupon.id}/", {"excluded_products": [str(uuid4())]}, format="json"
        )
        assert response.status_code == 400

    def test_null_clears_usage_limit_and_cap(self, admin_client, make_coupon):
        coupon = make_coupon(usage_limit=5, maximum_discount_amount=Decimal("200"))

        response = admin_client.patch(
            f"{URL}{coupon.id}/",
            {"usage_limit": None, "maximum_discount_amount": None},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["usage_limit"] is None
        assert response.data["maximum_discount_amount"] is None
        assert response.data["remaining_usage"] is None
        coupon.refresh_from_db()
        assert coupon.usage_limit is None

    def test_list_and_retrieve(self, admin_client, make_coupon):
        coupon = make_coupon()

        listing = admin_client.get(URL)
        detail = admin_client.get(f"{URL}{coupon.id}/")

        assert listing.data["count"] == 1
        assert detail.status_code == 200
        assert detail.data["remaining_usage"] is None

    def test_update_keeps_code(self, admin_client, make_coupon):
        coupon = make_coupon()

        response = admin_client.patch(
            f"{URL}{coupon.id}/", {"code": "OTHER", "is_active": False}, format="json"
        )

        assert response.status_code == 200
        assert response.data["code"] == "DIWALI10"
        assert response.data["is_active"] is False
        assert response.data["is_valid"] is False

    def test_delete(self, admin_client, make_coupon):
        coupon = make_coupon()
        assert admin_client.delete(f"{URL}{coupon.id}/").status_code == 204
        assert admin_client.delete(f"{URL}{coupon.id}/").status_code == 404

    def test_retrieve_unknown(self, admin_client):
        assert admin_client.get(f"{URL}{uuid4()}/").status_code == 404

    def test_stats(self, admin_client, make_coupon):
        make_coupon()
        response = admin_client.get(f"{URL}stats/")
        assert response.status_code == 200
        assert response.data["total"] == 1
        assert response.data["active"] == 1

    @pytest.mark.parametrize("path", ["", "stats/"])
    def test_customers_forbidden(self, customer_client, path):
        assert customer_client.get(f"{URL}{path}").status_code == 403

    def test_anonymous_unauthorized(self, api_client):
        assert api_client.get(URL).status_code == 401
