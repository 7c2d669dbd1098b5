"""Integration tests for the Category API endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.categories.models import Category

pytestmark = pytest.mark.integration

URL = "/api/v1/categories/"


def _detail(category) -> str:
    return f"{URL}{category.id}/"


class TestPublicReads:
    def test_list_is_public_and_hides_inactive(self, api_client, category):
        Category.objects.create(name="Old Range", is_active=False)

        response = api_client.get(URL)

        assert response.status_code == 200
        names = [c["name"] for c in response.data["results"]]
        assert names == ["Sparklers"]

    def test_list_carries_product_count(self, api_client, category, make_product):
        make_product()
        make_product()
        deleted = make_product()
        deleted.delete()

        response = api_client.get(URL)

        assert response.data["results"][0]["product_count"] == 2

    def test_ordered_by_sort_order_then_name(self, api_client):
        Category.objects.create(name="Rockets", sort_order=2)
        Category.objects.create(name="Bombs", sort_order=2)
        Category.objects.create(name="Chakkars", sort_order=1)

        response = api_client.get(URL)

        assert [c["name"] for c in response.data["results"]] == [
            "Chakkars",
            "Bombs",
            "Rockets",
        ]

    def test_search_by_name(self, api_client, category):
        Category.objects.create(name="Rockets")
        response = api_client.get(URL, {"search": "spark"})
        assert [c["name"] for c in response.data["results"]] == ["Sparklers"]

    def test_retrieve(self, api_client, category):
        response = api_client.get(_detail(category))
        assert response.status_code == 200
        assert response.data["slug"] == "sparklers"

    def test_inactive_hidden_from_public_retrieve(self, api_client):
        hidden = Category.objects.create(name="Old Range", is_active=False)
        response = api_client.get(_detail(hidden))
        assert response.status_code == 404
        assert response.data == {"detail": "Category not found."}

    def test_admin_sees_inactive(self, admin_client, category):
        Category.objects.create(name="Old Range", is_active=False)

        response = admin_client.get(URL, {"include_inactive": "true"})

        assert response.data["count"] == 2

    def test_include_inactive_ignored_for_customers(self, customer_client, category):
        Category.objects.create(name="Old Range", is_active=False)
        response = customer_client.get(URL, {"include_inactive": "true"})
        assert response.data["count"] == 1


class TestAdminWrites:
    def test_create(self, admin_client):
        response = admin_client.post(
            URL,
            {"name": "Sky Shots", "description": "Aerial fireworks", "sort_order": 3},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["slug"] == "sky-shots"
        assert response.data["is_active"] is True

    def test_customer_cannot_create(self, customer_client):
        response = customer_client.post(URL, {"name": "Sky Shots"}, format="json")
        assert response.status_code == 403

    def test_anonymous_cannot_create(self, api_client):
        response = api_client.post(URL, {"name": "Sky Shots"}, format="json")
        assert response.status_code == 401

    def test_duplicate_name_conflict(self, admin_client, category):
        response = admin_client.post(URL, {"name": "SPARKLERS"}, format="json")
        assert response.status_code == 409

    def test_missing_name(self, admin_client):
        response = admin_client.post(URL, {"description": "x"}, format="json")
        assert response.status_code == 400
        assert "name" in response.data

    def test_partial_update(self, admin_client, category):
        response = admin_client.patch(
            _detail(category), {"is_active": False}, format="json"
        )
        assert response.status_code == 200
        assert response.data["is_active"] is False
        assert response.data["name"] == "Sparklers"

    def test_rename_regenerates_slug(self, admin_client, category):
        response = admin_client.patch(
            _detail(category), {"name": "Colour Sparklers"}, format="json"
        )
        assert response.data["slug"] == "colour-sparklers"

    def test_update_unknown(self, admin_client):
        response = admin_client.patch(f"{URL}{uuid4()}/", {"name": "X"}, format="json")
        assert response.status_code == 404

    def test_delete_empty_category(self, admin_client, category):
        response = admin_client.delete(_detail(category))
        assert response.status_code == 204
        assert not Category.objects.filter(id=category.id).exists()

    def test_delete_in_use_conflict(self, admin_client, category, product):
        response = admin_client.delete(_detail(category))
        assert response.status_code == 409
        assert "1 product" in response.data["detail"]
        assert Category.objects.filter(id=category.id).exists()
