"""Coupon DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.coupons.constants import (
    CODE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    DiscountType,
)
from modules.coupons.models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    is_valid = serializers.BooleanField(read_only=True)
    remaining_usage = serializers.IntegerField(read_only=True, allow_null=True)
    applicable_categories = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    excluded_categories = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    applicable_products = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    excluded_products = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = Coupon
        fields = [
            "id",
            "code",
            "name",
            "description",
            "discount_type",
            "value",
            "minimum_order_amount",
            "maximum_discount_amount",
            "usage_limit",
            "used_count",
            "remaining_usage",
            "user_usage_limit",
            "start_date",
            "end_date",
            "is_active",
            "is_valid",
            "applicable_categories",
            "excluded_categories",
            "applicable_products",
            "excluded_products",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CouponWriteSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=CODE_MAX_LENGTH)
    name = serializers.CharField(max_length=NAME_MAX_LENGTH)
    description = serializers.CharField(
        max_length=DESCRIPTION_MAX_LENGTH, required=False, allow_blank=True
    )
    discount_type = serializers.ChoiceField(choices=DiscountType.choices)
    value = serializers.DecimalField(max_digits=10, decimal_places=2)
    minimum_order_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False
    )
    maximum_discount_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    usage_limit = serializers.IntegerField(required=False, allow_null=True)
    user_usage_limit = serializers.IntegerField(required=False)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    is_active = serializers.BooleanField(required=False)
    applicable_categories = serializers.ListField(
        child=serializers.UUIDField(), required=False
    )
    excluded_categories = serializers.ListField(
        child=serializers.UUIDField(), required=False
    )
    applicable_products = serializers.ListField(
        child=serializers.UUIDField(), required=False
    )
    excluded_products = serializers.ListField(
        child=serializers.UUIDField(), required=False
    )


class ValidateCouponItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class ValidateCouponSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=CODE_MAX_LENGTH)
    order_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0
    )
    items = ValidateCouponItemSerializer(many=True, required=False)
    customer_email = serializers.EmailField(required=False)
