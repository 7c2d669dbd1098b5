"""Integration tests for the store settings endpoints."""

from __future__ import annotations

import pytest

from modules.store_settings.constants import DEFAULT_SETTINGS
from modules.store_settings.models import Setting

pytestmark = pytest.mark.integration

URL = "/api/v1/settings/"


@pytest.fixture()
def seeded(admin_client):
    admin_client.post(f"{URL}init/")


class TestPublicRead:
    def test_hides_email_settings(self, api_client, seeded):
        response = api_client.get(URL)

        assert response.status_code == 200
        assert response.data["company_name"] == "Cracker Shop"
        assert response.data["tax_rate"] == 18
        assert "admin_email" not in response.data
        assert "order_notification_email" not in response.data

    def test_filter_by_category(self, api_client, seeded):
        response = api_client.get(URL, {"category": "shipping"})
        assert set(response.data) == {
            "free_shipping_threshold",
            "shipping_cost",
            "max_shipping_weight",
        }

    def test_private_category_is_empty_for_public(self, api_client, seeded):
        assert api_client.get(URL, {"category": "email"}).data == {}

    def test_unknown_category(self, api_client):
        response = api_client.get(URL, {"category": "weather"})
        assert response.status_code == 400

    def test_admin_can_read_everything(self, admin_client, seeded):
        response = admin_client.get(URL, {"all": "true"})
        assert response.data["admin_email"] == "admin@crackershop.com"
        assert response.data["order_notification_email"] is True

    def test_all_flag_ignored_for_visitors(self, api_client, seeded):
        assert "admin_email" not in api_client.get(URL, {"all": "true"}).data


class TestInit:
    def test_creates_defaults_once(self, admin_client):
        first = admin_client.post(f"{URL}init/")
        second = admin_client.post(f"{URL}init/")

        assert first.data == {"created": len(DEFAULT_SETTINGS)}
        assert second.data == {"created": 0}

    def test_customer_forbidden(self, customer_client):
        assert customer_client.post(f"{URL}init/").status_code == 403


class TestBulkUpdate:
    def test_update_existing_keys(self, admin_client, api_client, seeded):
        response = admin_client.put(
            URL,
            {"settings": {"tax_rate": 12, "company_name": "Sivakasi Sparkles"}},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["tax_rate"] == 12
        public = api_client.get(URL).data
        assert public["company_name"] == "Sivakasi Sparkles"
        assert public["tax_rate"] == 12

    def test_unknown_key_rejects_whole_batch(self, admin_client, seeded):
        response = admin_client.put(
            URL,
            {"settings": {"company_name": "Changed", "nope": 1}},
            format="json",
        )

        assert response.status_code == 404
        assert Setting.objects.get(key="company_name").value == "Cracker Shop"

    def test_bad_number(self, admin_client, seeded):
        response = admin_client.put(
            URL, {"settings": {"tax_rate": "eighteen"}}, format="json"
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-1"])
    def test_rejected_tax_rate_keeps_checkout_working(
        self, admin_client, api_client, seeded, product, checkout_payload, value
    ):
        response = admin_client.put(URL, {"settings": {"tax_rate": value}}, format="json")

        assert response.status_code == 400
        assert Setting.objects.get(key="tax_rate").value == "18"
        order = api_client.post(
            "/api/v1/orders/", checkout_payload((product, 1)), format="json"
        )
        assert order.status_code == 201
        assert order.data["tax_amount"] == "36.00"

    def test_empty_body(self, admin_client):
        assert admin_client.put(URL, {"settings": {}}, format="json").status_code == 400

    def test_customer_forbidden(self, customer_client):
        response = customer_client.put(URL, {"settings": {"tax_rate": 0}}, format="json")
        assert response.status_code == 403


class TestSingleKey:
    def test_get_record(self, admin_client, seeded):
        response = admin_client.get(f"{URL}shipping_cost/")

        assert response.status_code == 200
        assert response.data["value"] == "50"
        assert response.data["value_type"] == "number"
        assert response.data["category"] == "shipping"

    def test_get_missing(self, admin_client):
        assert admin_client.get(f"{URL}missing_key/").status_code == 404

    def test_upsert_new_key(self, admin_client, api_client):
        response = admin_client.put(
            f"{URL}delivery_zones/",
            {"value": ["Chennai", "Madurai"], "value_type": "array", "category": "shipping"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["typed_value"] == ["Chennai", "Madurai"]
        assert api_client.get(URL).data["delivery_zones"] == ["Chennai", "Madurai"]

    def test_upsert_known_key_uses_default_type(self, admin_client):
        response = admin_client.put(f"{URL}free_shipping_threshold/", {"value": 1500}, format="json")

        assert response.data["value_type"] == "number"
        assert response.data["category"] == "shipping"
        assert response.data["value"] == "1500"

    def test_upsert_type_mismatch(self, admin_client):
        response = admin_client.put(
            f"{URL}delivery_zones/",
            {"value": "Chennai", "value_type": "array"},
            format="json",
        )
        assert response.status_code == 400

    def test_detail_is_admin_only(self, customer_client, api_client):
        assert customer_client.get(f"{URL}tax_rate/").status_code == 403
        assert api_client.get(f"{URL}tax_rate/").status_code == 401
