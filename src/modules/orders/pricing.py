"""Order totals.

    tax      = (subtotal - discount) * tax_rate / 100
    shipping = 0 if subtotal >= free_shipping_threshold else shipping_cost
    total    = subtotal - discount + shipping + tax

The shipping threshold is compared against the subtotal before discount.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from modules.core.money import ZERO, quantize_money


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount_amount: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def calculate_totals(
    subtotal: Decimal,
    discount: Decimal,
    tax_rate: Decimal,
    free_shipping_threshold: Decimal,
    shipping_cost: Decimal,
) -> OrderTotals:
    subtotal = quantize_money(subtotal)
    discount = quantize_money(min(max(discount, ZERO), subtotal))
    taxable = subtotal - discount

    tax = quantize_money(taxable * tax_rate / Decimal("100"))
    shipping = ZERO if subtotal >= free_shipping_threshold else quantize_money(shipping_cost)

    return OrderTotals(
        subtotal=subtotal,
        discount_amount=discount,
        shipping_cost=shipping,
        tax_amount=tax,
        total_amount=quantize_money(taxable + shipping + tax),
    )
