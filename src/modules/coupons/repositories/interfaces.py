"""Coupon repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.coupons.models import Coupon


class ICouponRepository(IRepository["Coupon"]):
    @abstractmethod
    def get_by_code(self, code: str, for_update: bool = False) -> Optional[Coupon]:
        """Look-up by (uppercased) code, optionally with a row lock."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Coupon]:
        """Retrieve a coupon with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def count_customer_uses(self, coupon_id, customer_email: str) -> int:
        """Non-cancelled orders placed with this coupon by ``customer_email``."""

    @abstractmethod
    def set_scope(self, coupon: Coupon, **scope) -> None:
        """Replace the applicability sets given as keyword lists of ids."""

    @abstractmethod
    def missing_scope_ids(self, **scope) -> List:
        """Ids in the given applicability lists that match no category or product."""

    @abstractmethod
    def stats(self) -> Dict[str, int]:
        """Coupon counters for the admin screens."""

    @abstractmethod
    def increment_usage(self, coupon: Coupon) -> None:
        """Atomically add one to ``used_count``."""

    @abstractmethod
    def release_usage(self, coupon_id) -> None:
        """Atomically subtract one from ``used_count`` (never below zero)."""
