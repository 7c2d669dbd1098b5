"""Unit tests for the order and payment state machines."""

from __future__ import annotations

import pytest

from modules.orders.constants import (
    PAYMENT_TRANSITIONS,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    PaymentStatus,
)
from modules.orders.models import Order

pytestmark = pytest.mark.unit


def _order(status=OrderStatus.PENDING, payment_status=PaymentStatus.PENDING) -> Order:
    return Order(status=status, payment_status=payment_status)


class TestOrderTransitions:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (current, target)
            for current, targets in VALID_TRANSITIONS.items()
            for target in targets
        ],
    )
    def test_valid(self, current, target):
        assert _order(current).can_transition_to(target) is True

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (OrderStatus.PENDING, OrderStatus.SHIPPED),
            (OrderStatus.PENDING, OrderStatus.DELIVERED),
            (OrderStatus.CONFIRMED, OrderStatus.PENDING),
            (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
            (OrderStatus.SHIPPED, OrderStatus.PROCESSING),
            (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
        ],
    )
    def test_invalid(self, current, target):
        assert _order(current).can_transition_to(target) is False

    def test_terminal_states(self):
        assert TERMINAL_STATES == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
        for status in TERMINAL_STATES:
            order = _order(status)
            assert order.is_terminal is True
            assert not any(order.can_transition_to(s) for s in OrderStatus.values)

    def test_open_states_are_not_terminal(self):
        assert _order(OrderStatus.PROCESSING).is_terminal is False


class TestPaymentTransitions:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (current, target)
            for current, targets in PAYMENT_TRANSITIONS.items()
            for target in targets
        ],
    )
    def test_valid(self, current, target):
        assert _order(payment_status=current).can_change_payment_to(target) is True

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (PaymentStatus.PENDING, PaymentStatus.REFUNDED),
            (PaymentStatus.PAID, PaymentStatus.PENDING),
            (PaymentStatus.REFUNDED, PaymentStatus.PAID),
        ],
    )
    def test_invalid(self, current, target):
        assert _order(payment_status=current).can_change_payment_to(target) is False
