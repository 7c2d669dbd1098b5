import django_filters

from modules.orders.constants import OrderStatus, OrderType, PaymentStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    payment_status = django_filters.ChoiceFilter(choices=PaymentStatus.choices)
    order_type = django_filters.ChoiceFilter(choices=OrderType.choices)
    customer_email = django_filters.CharFilter(lookup_expr="iexact")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(
        field_name="total_amount", lookup_expr="gte"
    )
    max_total = django_filters.NumberFilter(
        field_name="total_amount", lookup_expr="lte"
    )

    class Meta:
        model = Order
        fields = [
            "status",
            "payment_status",
            "order_type",
            "customer_email",
            "start_date",
            "end_date",
            "min_total",
            "max_total",
        ]
