"""Product DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.constants import ProductStatus, ProductUnit, StockOperation
from modules.products.models import Product


class ProductCategorySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    slug = serializers.CharField(read_only=True)


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    category = ProductCategorySerializer(read_only=True)
    selling_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    discount_percentage = serializers.IntegerField(read_only=True)
    stock_status = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "category",
            "price",
            "discount_price",
            "selling_price",
            "discount_percentage",
            "stock_quantity",
            "stock_status",
            "unit",
            "weight",
            "status",
            "is_featured",
            "tags",
            "image_url",
            "views",
            "sales",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductWriteSerializer(serializers.Serializer):
    """Validates create/update payloads before they become DTOs."""

    sku = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=100)
    category_id = serializers.UUIDField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    discount_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    description = serializers.CharField(
        max_length=1000, required=False, allow_blank=True
    )
    stock_quantity = serializers.IntegerField(min_value=0, required=False)
    unit = serializers.ChoiceField(choices=ProductUnit.choices, required=False)
    weight = serializers.DecimalField(
        max_digits=8, decimal_places=3, required=False, allow_null=True
    )
    status = serializers.ChoiceField(choices=ProductStatus.choices, required=False)
    is_featured = serializers.BooleanField(required=False)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False
    )
    image_url = serializers.URLField(max_length=500, required=False, allow_blank=True)


class StockAdjustmentSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)
    operation = serializers.ChoiceField(
        choices=StockOperation.choices, default=StockOperation.SET
    )
