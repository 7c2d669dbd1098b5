"""Admin dashboard and sales reports.

Revenue and order counts always leave cancelled orders out.  Growth
figures compare a period with the period of equal length right before it;
when the previous period is empty the growth is reported as ``0``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, Q, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from modules.categories.models import Category
from modules.core.money import ZERO, quantize_money
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = structlog.get_logger(__name__)

TOP_PRODUCTS_LIMIT = 5


def growth_percentage(current: Decimal, previous: Decimal) -> float:
    if not previous:
        return 0.0
    return round(float((Decimal(current) - Decimal(previous)) / Decimal(previous) * 100), 2)


def _money(value: Optional[Decimal]) -> str:
    return str(quantize_money(value or ZERO))


def _start_of(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


class DashboardService:
    def _orders(self):
        return Order.objects.alive()

    def _sales(self):
        return self._orders().exclude(status=OrderStatus.CANCELLED)

    def _customers(self):
        return get_user_model().objects.filter(is_staff=False)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def overview(self) -> Dict[str, Any]:
        sales = self._sales().aggregate(total=Sum("total_amount"), count=Count("id"))
        by_status = dict(
            self._orders().values_list("status").annotate(n=Count("id")).order_by()
        )
        categories = Category.objects.aggregate(
            total=Count("id"), active=Count("id", filter=Q(is_active=True))
        )
        return {
            "total_sales": _money(sales["total"]),
            "total_orders": sales["count"],
            "total_customers": self._customers().count(),
            "orders_by_status": {
                value: by_status.get(value, 0) for value in OrderStatus.values
            },
            "products": ProductDjangoRepository().stats(),
            "categories": categories,
        }

    def recent_orders(self, limit: int = 5):
        return self._orders().prefetch_related("items").order_by("-created_at")[:limit]

    def today(self) -> Dict[str, Any]:
        start = _start_of(timezone.localdate())
        todays = self._orders().filter(created_at__gte=start)
        revenue = todays.exclude(status=OrderStatus.CANCELLED).aggregate(
            total=Sum("total_amount")
        )["total"]
        return {
            "new_orders": todays.count(),
            "revenue": _money(revenue),
            "pending_orders": self._orders().filter(status=OrderStatus.PENDING).count(),
            "new_customers": self._customers().filter(date_joined__gte=start).count(),
        }

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def _period_metrics(self, start: datetime, end: datetime) -> Dict[str, Any]:
        window = self._sales().filter(created_at__gte=start, created_at__lt=end)
        row = window.aggregate(
            revenue=Sum("total_amount"),
            orders=Count("id"),
            aov=Avg("total_amount"),
        )
        return {
            "revenue": row["revenue"] or ZERO,
            "orders": row["orders"],
            "aov": row["aov"] or ZERO,
            "customers": self._customers()
            .filter(date_joined__gte=start, date_joined__lt=end)
            .count(),
        }

    def analytics(self, period: int = 30) -> Dict[str, Any]:
        now = timezone.now()
        start = now - timedelta(days=period)
        previous_start = start - timedelta(days=period)

        current = self._period_metrics(start, now)
        previous = self._period_metrics(previous_start, start)

        top_products = list(
            OrderItem.objects.filter(
                order__deleted_at__isnull=True,
                order__created_at__gte=start,
            )
            .exclude(order__status=OrderStatus.CANCELLED)
            .values("product_id", "product_name")
            .annotate(
                quantity_sold=Sum("quantity"),
                revenue=Sum("subtotal"),
            )
            .order_by("-revenue")[:TOP_PRODUCTS_LIMIT]
        )

        logger.info("dashboard.analytics", period=period, orders=current["orders"])
        return {
            "period_days": period,
            "metrics": {
                "total_revenue": _money(current["revenue"]),
                "total_orders": current["orders"],
                "total_customers": self._customers().count(),
                "new_customers": current["customers"],
                "avg_order_value": _money(current["aov"]),
                "revenue_growth": growth_percentage(current["revenue"], previous["revenue"]),
                "orders_growth": growth_percentage(current["orders"], previous["orders"]),
                "customers_growth": growth_percentage(
                    current["customers"], previous["customers"]
                ),
                "aov_growth": growth_percentage(current["aov"], previous["aov"]),
            },
            "top_products": [
                {
                    "product_id": row["product_id"],
                    "name": row["product_name"],
                    "quantity_sold": row["quantity_sold"],
                    "revenue": _money(row["revenue"]),
                }
                for row in top_products
            ],
        }

    def sales_chart(self, period: int = 30) -> List[Dict[str, Any]]:
        """One entry per day of the period, days without sales included."""
        today = timezone.localdate()
        first_day = today - timedelta(days=period - 1)

        rows = (
            self._sales()
            .filter(created_at__gte=_start_of(first_day))
            .annotate(day=TruncDate("created_at"))
            .values("day")
            .annotate(revenue=Sum("total_amount"), orders=Count("id"))
            .order_by("day")
        )
        by_day = {row["day"]: row for row in rows}

        chart = []
        for offset in range(period):
            day = first_day + timedelta(days=offset)
            row = by_day.get(day)
            chart.append(
                {
                    "date": day.isoformat(),
                    "revenue": _money(row["revenue"] if row else None),
                    "orders": row["orders"] if row else 0,
                }
            )
        return chart
