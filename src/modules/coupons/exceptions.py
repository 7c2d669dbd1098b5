"""Coupon domain exceptions.

``CouponNotApplicable`` and its subclasses describe why a known coupon
cannot be used on a given order; the API layer answers them with 400.
"""

from __future__ import annotations


class CouponNotFound(Exception):
    """No coupon exists with the requested id or code."""


class CouponAlreadyExists(Exception):
    """Another coupon already uses this code."""


class InvalidCoupon(Exception):
    """The coupon definition breaks a rule (dates, percentage range...)."""


class CouponNotApplicable(Exception):
    """The coupon cannot be applied to this order."""


class CouponInactive(CouponNotApplicable):
    """The coupon has been switched off."""


class CouponNotStarted(CouponNotApplicable):
    """The coupon's validity window has not opened yet."""


class CouponExpired(CouponNotApplicable):
    """The coupon's validity window has closed."""


class CouponUsageLimitReached(CouponNotApplicable):
    """The coupon has been used ``usage_limit`` times."""


class CustomerUsageLimitReached(CouponNotApplicable):
    """This customer already used the coupon ``user_usage_limit`` times."""


class MinimumOrderNotMet(CouponNotApplicable):
    """The order subtotal is below ``minimum_order_amount``."""


class CouponNotApplicableToItems(CouponNotApplicable):
    """No item matches the coupon scope, or an item is excluded."""
