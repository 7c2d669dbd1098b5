"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import (
    DEFAULT_COUNTRY,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from modules.orders.models import Order, OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class AddressSerializer(serializers.Serializer):
    """Lengths mirror the ``Order.address_*`` columns."""

    street = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=255
    )
    city = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=100
    )
    state = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=100
    )
    zip_code = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=20
    )
    country = serializers.CharField(
        required=False, default=DEFAULT_COUNTRY, allow_blank=True, max_length=100
    )


class CustomerInfoSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20)
    address = AddressSerializer(required=False)


class CreateOrderItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """Checkout payload."""

    customer = CustomerInfoSerializer()
    items = CreateOrderItemSerializer(many=True, allow_empty=False)
    coupon_code = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=20
    )
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, default=PaymentMethod.UPI
    )
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class UpdateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, default="", allow_blank=True)


class UpdatePaymentSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(
        choices=PaymentStatus.choices, required=False
    )
    tracking_number = serializers.CharField(
        required=False, allow_blank=True, max_length=100
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError(
                "Provide payment_status and/or tracking_number."
            )
        return attrs


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item with the product snapshot taken at checkout."""

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "product_sku",
            "image_url",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    customer = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_id",
            "customer",
            "status",
            "payment_method",
            "payment_status",
            "order_type",
            "subtotal",
            "discount_amount",
            "discount_type",
            "coupon_code",
            "shipping_cost",
            "tax_amount",
            "total_amount",
            "notes",
            "tracking_number",
            "delivered_at",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields

    def get_customer(self, obj: Order) -> dict:
        return {
            "name": obj.customer_name,
            "email": obj.customer_email,
            "phone": obj.customer_phone,
            "address": {
                "street": obj.address_street,
                "city": obj.address_city,
                "state": obj.address_state,
                "zip_code": obj.address_zip_code,
                "country": obj.address_country,
            },
        }


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    items_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_name",
            "customer_email",
            "status",
            "payment_status",
            "order_type",
            "total_amount",
            "items_count",
            "created_at",
        ]
        read_only_fields = fields
