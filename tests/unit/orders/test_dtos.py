"""Unit tests for order DTO validation."""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.constants import PaymentMethod
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, CustomerInfoDTO

pytestmark = pytest.mark.unit


def _customer(**overrides) -> dict:
    data = {"name": "Arun Kumar", "email": "Arun@Example.com", "phone": "9876500001"}
    data.update(overrides)
    return data


class TestCustomerInfoDTO:
    def test_email_lowercased_and_country_defaulted(self):
        dto = CustomerInfoDTO(**_customer())
        assert dto.email == "arun@example.com"
        assert dto.country == "India"

    @pytest.mark.parametrize("field", ["name", "phone"])
    def test_blank_required_field(self, field):
        with pytest.raises(ValidationError, match="required"):
            CustomerInfoDTO(**_customer(**{field: "  "}))

    @pytest.mark.parametrize("email", ["not-an-email", "a@b..c", "a@b", "a b@example.com"])
    def test_invalid_email(self, email):
        with pytest.raises(ValidationError, match="valid email"):
            CustomerInfoDTO(**_customer(email=email))

    def test_is_frozen(self):
        dto = CustomerInfoDTO(**_customer())
        with pytest.raises(ValidationError):
            dto.name = "Someone else"


class TestCreateOrderDTO:
    def test_defaults(self):
        dto = CreateOrderDTO(
            customer=_customer(),
            items=[{"product_id": uuid4(), "quantity": 2}],
        )
        assert dto.payment_method == PaymentMethod.UPI
        assert dto.coupon_code is None
        assert dto.idempotency_key is None

    def test_coupon_code_normalised(self):
        dto = CreateOrderDTO(
            customer=_customer(),
            items=[{"product_id": uuid4(), "quantity": 1}],
            coupon_code=" diwali10 ",
        )
        assert dto.coupon_code == "DIWALI10"

    def test_blank_coupon_code_becomes_none(self):
        dto = CreateOrderDTO(
            customer=_customer(),
            items=[{"product_id": uuid4(), "quantity": 1}],
            coupon_code="   ",
        )
        assert dto.coupon_code is None

    def test_empty_items(self):
        with pytest.raises(ValidationError, match="at least one item"):
            CreateOrderDTO(customer=_customer(), items=[])

    def test_zero_quantity(self):
        with pytest.raises(ValidationError, match="Quantity must be at least 1"):
            CreateOrderItemDTO(product_id=uuid4(), quantity=0)

    def test_duplicate_products(self):
        product_id = uuid4()
        with pytest.raises(ValidationError, match="Duplicate product IDs"):
            CreateOrderDTO(
                customer=_customer(),
                items=[
                    {"product_id": product_id, "quantity": 1},
                    {"product_id": product_id, "quantity": 2},
                ],
            )
