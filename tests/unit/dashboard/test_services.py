"""Unit tests for the dashboard aggregates and sales reports."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from modules.dashboard.services import DashboardService, growth_percentage
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO
from modules.orders.models import Order
from modules.orders.services import get_order_service

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return DashboardService()


@pytest.fixture()
def place_order(product):
    """Places a 2 x 200.00 order (total 522.00) and returns it."""
    orders = get_order_service()
    counter = {"n": 0}

    def _place(days_ago: int = 0, cancel: bool = False) -> Order:
        counter["n"] += 1
        order = orders.create_order(
            CreateOrderDTO(
                customer={
                    "name": "Karthik",
                    "email": f"karthik{counter['n']}@example.com",
                    "phone": "9876500003",
                },
                items=[{"product_id": product.id, "quantity": 2}],
            )
        )
        if cancel:
            orders.cancel_order(order.id)
        if days_ago:
            Order.objects.filter(id=order.id).update(
                created_at=timezone.now() - timedelta(days=days_ago)
            )
        return Order.objects.get(id=order.id)

    return _place


class TestGrowthPercentage:
    @pytest.mark.parametrize(
        ("current", "previous", "expected"),
        [
            (Decimal("150"), Decimal("100"), 50.0),
            (Decimal("50"), Decimal("100"), -50.0),
            (Decimal("100"), Decimal("0"), 0.0),
            (3, 0, 0.0),
            (2, 3, -33.33),
        ],
    )
    def test_values(self, current, previous, expected):
        assert growth_percentage(current, previous) == expected


class TestOverview:
    def test_counts_and_revenue_exclude_cancelled(
        self, service, place_order, customer_user, admin_user, category
    ):
        place_order()
        place_order()
        place_order(cancel=True)

        data = service.overview()

        assert data["total_sales"] == "1044.00"
        assert data["total_orders"] == 2
        assert data["total_customers"] == 1
        assert data["orders_by_status"][OrderStatus.PENDING] == 2
        assert data["orders_by_status"][OrderStatus.CANCELLED] == 1
        assert data["orders_by_status"][OrderStatus.DELIVERED] == 0
        assert data["products"]["total"] == 1
        assert data["categories"] == {"total": 1, "active": 1}

    def test_empty_store(self, service):
        data = service.overview()
        assert data["total_sales"] == "0.00"
        assert data["total_orders"] == 0
        assert set(data["orders_by_status"]) == set(OrderStatus.values)


class TestRecentAndToday:
    def test_recent_orders_newest_first(self, service, place_order):
        older = place_order(days_ago=2)
        newer = place_order()

        assert list(service.recent_orders(limit=5)) == [newer, older]
        assert list(service.recent_orders(limit=1)) == [newer]

    def test_today(self, service, place_order, customer_user):
        place_order()
        place_order(cancel=True)
        place_order(days_ago=3)

        data = service.today()

        assert data["new_orders"] == 2
        assert data["revenue"] == "522.00"
        assert data["pending_orders"] == 2
        assert data["new_customers"] == 1


class TestAnalytics:
    def test_metrics_and_growth(self, service, place_order):
        place_order()
        place_order(days_ago=1)
        place_order(days_ago=40)
        place_order(days_ago=5, cancel=True)

        data = service.analytics(period=30)
        metrics = data["metrics"]

        assert data["period_days"] == 30
        assert metrics["total_revenue"] == "1044.00"
        assert metrics["total_orders"] == 2
        assert metrics["avg_order_value"] == "522.00"
        assert metrics["revenue_growth"] == 100.0
        assert metrics["orders_growth"] == 100.0
        assert metrics["aov_growth"] == 0.0
        assert metrics["customers_growth"] == 0.0

    def test_top_products(self, service, place_order, product):
        place_order()
        place_order()

        top = service.analytics(period=7)["top_products"]

        assert top == [
            {
                "product_id": product.id,
                "name": "Flower Pot Big",
                "quantity_sold": 4,
                "revenue": "800.00",
            }
        ]


class TestSalesChart:
    def test_one_entry_per_day(self, service, place_order):
        place_order()
        place_order(days_ago=2)

        chart = service.sales_chart(period=7)

        assert len(chart) == 7
        assert chart[-1]["date"] == timezone.localdate().isoformat()
        assert chart[-1] == {
            "date": timezone.localdate().isoformat(),
            "revenue": "522.00",
            "orders": 1,
        }
        assert chart[-3]["orders"] == 1
        assert sum(entry["orders"] for entry in chart) == 2
        assert chart[0]["revenue"] == "0.00"
