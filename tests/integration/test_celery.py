"""Integration tests for the Celery configuration and order notification task."""

from decimal import Decimal

import pytest
from django.core import mail

from modules.orders.models import Order, OrderItem
from modules.store_settings.constants import ADMIN_EMAIL
from modules.store_settings.services import get_store_settings_service

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _celery_eager(settings):
    """Run tasks synchronously inside the test process."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture()
def placed_order(product):
    order = Order.objects.create(
        customer_name="Arun Kumar",
        customer_email="arun@example.com",
        customer_phone="9876500001",
        subtotal=Decimal("400.00"),
        tax_amount=Decimal("72.00"),
        shipping_cost=Decimal("50.00"),
        total_amount=Decimal("522.00"),
    )
    OrderItem.objects.create(
        order=order,
        product=product,
        product_name=product.name,
        product_sku=product.sku,
        unit_price=Decimal("200.00"),
        quantity=2,
    )
    return order


class TestCeleryConfig:
    """Celery loads its configuration from the Django settings."""

    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "crackershop"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "crackershop"

    def test_celery_broker_url_configured(self, settings):
        assert settings.CELERY_BROKER_URL is not None
        assert "redis" in settings.CELERY_BROKER_URL

    def test_celery_result_backend_configured(self, settings):
        assert settings.CELERY_RESULT_BACKEND is not None
        assert "redis" in settings.CELERY_RESULT_BACKEND

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_notification_task_is_registered(self):
        from config.celery import app
        from modules.orders.tasks import send_order_notification

        assert send_order_notification.name == "orders.send_order_notification"
        assert "orders.send_order_notification" in app.tasks


class TestSendOrderNotification:
    def test_sends_summary_to_admin_email(self, placed_order):
        from modules.orders.tasks import send_order_notification

        result = send_order_notification.delay(str(placed_order.id))

        assert result.successful()
        assert result.result is True
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["admin@crackershop.com"]
        assert message.subject == f"New order {placed_order.order_number} - 522.00"
        assert "Flower Pot Big" in message.body
        assert "Total: 522.00" in message.body

    def test_uses_admin_email_from_settings(self, placed_order):
        from modules.orders.tasks import send_order_notification

        get_store_settings_service().set_setting(ADMIN_EMAIL, "owner@crackershop.com")

        send_order_notification(str(placed_order.id))

        assert mail.outbox[0].to == ["owner@crackershop.com"]

    def test_missing_order_is_skipped(self):
        from modules.orders.tasks import send_order_notification

        assert send_order_notification("0190a0b0-0000-7000-8000-000000000000") is False
        assert mail.outbox == []

    def test_blank_admin_email_is_skipped(self, placed_order):
        from modules.orders.tasks import send_order_notification

        get_store_settings_service().set_setting(ADMIN_EMAIL, "")

        assert send_order_notification(str(placed_order.id)) is False
        assert mail.outbox == []
