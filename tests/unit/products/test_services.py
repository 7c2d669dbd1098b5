"""Unit tests for ProductService.

Covers:
- create_product: happy path, duplicate SKU, unknown category.
- update_product: partial update, discount kept below price, clearing a discount.
- adjust_stock: add / subtract / set, never below zero.
- get_product / list_products: inactive and soft-deleted products hidden.
- delete_product: soft delete.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.categories.exceptions import CategoryNotFound
from modules.products.constants import ProductStatus, StockOperation
from modules.products.dtos import AdjustStockDTO, CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    InsufficientStock,
    InvalidDiscountPrice,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return ProductService(repository=ProductDjangoRepository())


def _create_dto(category, **overrides) -> CreateProductDTO:
    fields = {
        "sku": "gc-001",
        "name": "Ground Chakkar Big",
        "category_id": category.id,
        "price": Decimal("120.00"),
        "stock_quantity": 40,
    }
    fields.update(overrides)
    return CreateProductDTO(**fields)


# ===========================================================================
# create_product
# ===========================================================================


class TestCreateProduct:
    def test_success(self, service, category):
        product = service.create_product(
            _create_dto(category, discount_price=Decimal("99.00"), tags=["Diwali", "diwali "])
        )

        assert product.sku == "GC-001"
        assert product.category == category
        assert product.selling_price == Decimal("99.00")
        assert product.tags == ["diwali"]
        assert Product.objects.filter(sku="GC-001").exists()

    def test_duplicate_sku_raises(self, service, category):
        service.create_product(_create_dto(category))
        with pytest.raises(ProductAlreadyExists, match="SKU"):
            service.create_product(_create_dto(category, name="Other"))

    def test_unknown_category_raises(self, service, category):
        with pytest.raises(CategoryNotFound):
            service.create_product(_create_dto(category, category_id=uuid4()))

    def test_repository_not_called_on_duplicate(self, category):
        repo = MagicMock()
        repo.get_by_sku.return_value = Product(sku="GC-001")
        with pytest.raises(ProductAlreadyExists):
            ProductService(repository=repo).create_product(_create_dto(category))
        repo.save.assert_not_called()


class TestCreateProductDTO:
    def test_discount_must_be_below_price(self, category):
        with pytest.raises(ValueError, match="less than price"):
            _create_dto(category, discount_price=Decimal("120.00"))

    def test_price_must_be_positive(self, category):
        with pytest.raises(ValueError, match="greater than zero"):
            _create_dto(category, price=Decimal("0"))

    def test_negative_stock_rejected(self, category):
        with pytest.raises(ValueError, match="cannot be negative"):
            _create_dto(category, stock_quantity=-1)


# ===========================================================================
# update_product
# ===========================================================================


class TestUpdateProduct:
    def test_partial_update(self, service, product):
        updated = service.update_product(
            str(product.id), UpdateProductDTO(name="Flower Pot Giant", is_featured=True)
        )
        assert updated.name == "Flower Pot Giant"
        assert updated.is_featured is True
        assert updated.price == Decimal("200.00")

    def test_discount_not_below_new_price_raises(self, service, make_product):
        product = make_product(price=Decimal("100.00"), discount_price=Decimal("80.00"))
        with pytest.raises(InvalidDiscountPrice):
            service.update_product(str(product.id), UpdateProductDTO(price=Decimal("70.00")))

    def test_clear_discount(self, service, make_product):
        product = make_product(price=Decimal("100.00"), discount_price=Decimal("80.00"))
        updated = service.update_product(
            str(product.id), UpdateProductDTO(clear_discount=True)
        )
        assert updated.discount_price is None
        assert updated.selling_price == Decimal("100.00")

    def test_not_found(self, service):
        with pytest.raises(ProductNotFound):
            service.update_product(str(uuid4()), UpdateProductDTO(name="X"))


# ===========================================================================
# adjust_stock
# ===========================================================================


class TestAdjustStock:
    def test_add(self, service, make_product):
        product = make_product(stock_quantity=10)
        result = service.adjust_stock(
            str(product.id), AdjustStockDTO(quantity=5, operation=StockOperation.ADD)
        )
        assert result.stock_quantity == 15

    def test_subtract(self, service, make_product):
        product = make_product(stock_quantity=10)
        result = service.adjust_stock(
            str(product.id), AdjustStockDTO(quantity=4, operation=StockOperation.SUBTRACT)
        )
        assert result.stock_quantity == 6

    def test_subtract_below_zero_raises(self, service, make_product):
        product = make_product(stock_quantity=3)
        with pytest.raises(InsufficientStock):
            service.adjust_stock(
                str(product.id),
                AdjustStockDTO(quantity=4, operation=StockOperation.SUBTRACT),
            )
        product.refresh_from_db()
        assert product.stock_quantity == 3

    def test_set_is_default_operation(self, service, make_product):
        product = make_product(stock_quantity=10)
        result = service.adjust_stock(str(product.id), AdjustStockDTO(quantity=0))
        assert result.stock_quantity == 0

    def test_negative_quantity_rejected_by_dto(self):
        with pytest.raises(ValueError):
            AdjustStockDTO(quantity=-1)


# ===========================================================================
# queries / delete
# ===========================================================================


class TestQueries:
    def test_inactive_product_hidden_from_storefront(self, service, make_product):
        product = make_product(status=ProductStatus.INACTIVE)
        with pytest.raises(ProductNotFound):
            service.get_product(str(product.id))
        assert service.get_product(str(product.id), include_inactive=True) == product

    def test_list_excludes_inactive_and_deleted(self, service, make_product):
        visible = make_product()
        make_product(status=ProductStatus.INACTIVE)
        make_product().delete()

        assert list(service.list_products()) == [visible]
        assert service.list_products(include_inactive=True).count() == 2

    def test_record_view_increments_counter(self, service, product):
        service.record_view(product)
        service.record_view(product)
        product.refresh_from_db()
        assert product.views == 2

    def test_stats(self, service, make_product):
        make_product(stock_quantity=0)
        make_product(stock_quantity=3, is_featured=True)
        make_product(status=ProductStatus.INACTIVE)

        stats = service.get_stats()

        assert stats["total"] == 3
        assert stats["active"] == 2
        assert stats["inactive"] == 1
        assert stats["featured"] == 1
        assert stats["low_stock"] == 1
        assert stats["out_of_stock"] == 1


class TestDeleteProduct:
    def test_soft_deletes(self, service, product):
        service.delete_product(str(product.id))
        product.refresh_from_db()
        assert product.is_deleted
        with pytest.raises(ProductNotFound):
            service.get_product(str(product.id), include_inactive=True)

    def test_not_found(self, service):
        with pytest.raises(ProductNotFound):
            service.delete_product(str(uuid4()))
