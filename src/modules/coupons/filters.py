import django_filters
from django.db.models import Q
from django.utils import timezone

from modules.coupons.models import Coupon


class CouponFilter(django_filters.FilterSet):
    is_active = django_filters.BooleanFilter(field_name="is_active")
    discount_type = django_filters.CharFilter(
        field_name="discount_type", lookup_expr="iexact"
    )
    expired = django_filters.BooleanFilter(method="filter_expired")

    class Meta:
        model = Coupon
        fields = ["is_active", "discount_type", "expired"]

    def filter_expired(self, queryset, name, value):
        expired = Q(end_date__lt=timezone.now())
        return queryset.filter(expired) if value else queryset.exclude(expired)
