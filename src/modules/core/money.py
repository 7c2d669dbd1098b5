"""Decimal helpers for monetary amounts (2 places, half-up)."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize_money(value: Union[Decimal, int, str]) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
