from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from modules.categories.models import Category
from modules.coupons.constants import DiscountType
from modules.coupons.models import Coupon
from modules.products.constants import ProductStatus
from modules.products.models import Product

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Settings and throttle counters live in the cache; start every test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="admin@crackershop.com",
        email="admin@crackershop.com",
        password="Adm1nPass!2024",
        first_name="Store Admin",
        is_staff=True,
    )


@pytest.fixture()
def customer_user():
    return User.objects.create_user(
        username="ravi@example.com",
        email="ravi@example.com",
        password="Cust0merPass!2024",
        first_name="Ravi",
    )


@pytest.fixture()
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture()
def customer_client(customer_user):
    client = APIClient()
    client.force_authenticate(user=customer_user)
    return client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def category():
    return Category.objects.create(name="Sparklers", sort_order=1)


@pytest.fixture()
def make_product(category):
    """Factory for products; every call gets a fresh SKU."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "sku": f"SKU-{counter['n']:03d}",
            "name": f"Product {counter['n']}",
            "category": category,
            "price": Decimal("100.00"),
            "stock_quantity": 50,
            "status": ProductStatus.ACTIVE,
        }
        fields.update(overrides)
        return Product.objects.create(**fields)

    return _make


@pytest.fixture()
def product(make_product):
    return make_product(name="Flower Pot Big", price=Decimal("200.00"))


@pytest.fixture()
def make_coupon():
    def _make(**overrides):
        now = timezone.now()
        fields = {
            "code": "DIWALI10",
            "name": "Diwali 10%",
            "discount_type": DiscountType.PERCENTAGE,
            "value": Decimal("10"),
            "start_date": now - timedelta(days=1),
            "end_date": now + timedelta(days=30),
        }
        fields.update(overrides)
        return Coupon.objects.create(**fields)

    return _make


@pytest.fixture()
def checkout_payload():
    """Builds a storefront checkout body for the given products."""

    def _payload(*lines, **extra):
        body = {
            "customer": {
                "name": "Priya Raman",
                "email": "priya@example.com",
                "phone": "9876500002",
                "address": {
                    "street": "12 Car Street",
                    "city": "Madurai",
                    "state": "Tamil Nadu",
                    "zip_code": "625001",
                },
            },
            "items": [
                {"product_id": str(product.id), "quantity": quantity}
                for product, quantity in lines
            ],
            "payment_method": "upi",
        }
        body.update(extra)
        return body

    return _payload
