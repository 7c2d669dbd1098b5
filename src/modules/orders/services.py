"""Order service layer (Use Cases).

Orchestrates the checkout transaction, status management, payment updates
and cancellation.  All write operations are atomic: the service defines
the unit-of-work boundary, so a failure at any step rolls back every
stock, sales and coupon change made before it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import models, transaction
from django.utils import timezone

from modules.core.money import ZERO
from modules.core.permissions import is_admin
from modules.coupons.rules import CouponLine
from modules.orders.constants import OrderStatus, OrderType, PaymentStatus
from modules.orders.exceptions import (
    InactiveProduct,
    InsufficientStock,
    InvalidOrderStatus,
    InvalidPaymentStatus,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.pricing import calculate_totals
from modules.store_settings.constants import (
    FREE_SHIPPING_THRESHOLD,
    ORDER_NOTIFICATION_EMAIL,
    SHIPPING_COST,
    TAX_RATE,
)

if TYPE_CHECKING:
    from modules.coupons.services import CouponService
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository
    from modules.store_settings.services import StoreSettingsService

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and collaborating services via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        coupon_service: CouponService,
        settings_service: StoreSettingsService,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._coupons = coupon_service
        self._settings = settings_service

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO, user=None) -> Order:
        """Place a storefront order.

        Steps:
        1. Return the existing order when the idempotency key was seen.
        2. For each item (sorted by product id to avoid deadlocks):
           lock the product row, check it is for sale and in stock,
           snapshot the selling price, take the quantity off stock and
           add it to the sales counter.
        3. Redeem the coupon, if any (row-locked, usage incremented).
        4. Compute tax, shipping and total from the store settings.
        5. Persist order + items + initial history.
        6. After commit, queue the admin notification e-mail.

        Raises:
            ProductNotFound: a product does not exist.
            InactiveProduct: a product is not for sale.
            InsufficientStock: not enough stock for a line.
            CouponNotFound: unknown coupon code.
            CouponNotApplicable: (subclasses) the coupon cannot be used.
        """
        return self._place(dto, user, OrderType.ONLINE, PaymentStatus.PENDING)

    @transaction.atomic
    def create_pos_order(self, dto: CreateOrderDTO, user=None) -> Order:
        """Counter sale entered by an admin; paid on the spot."""
        return self._place(dto, user, OrderType.POS, PaymentStatus.PAID)

    def _place(
        self,
        dto: CreateOrderDTO,
        user,
        order_type: str,
        payment_status: str,
    ) -> Order:
        log = logger.bind(
            customer_email=dto.customer.email,
            order_type=order_type,
            item_count=len(dto.items),
        )
        log.info("order.creation_started")

        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing:
                log.info(
                    "order.idempotency_hit",
                    order_id=str(existing.id),
                    key=dto.idempotency_key,
                )
                return existing

        lines, coupon_lines, subtotal = self._reserve_stock(dto, log)

        coupon = None
        discount = ZERO
        if dto.coupon_code:
            quote = self._coupons.redeem(
                dto.coupon_code,
                subtotal,
                coupon_lines,
                customer_email=dto.customer.email,
            )
            coupon, discount = quote.coupon, quote.discount

        totals = calculate_totals(
            subtotal=subtotal,
            discount=discount,
            tax_rate=self._settings.get_decimal(TAX_RATE),
            free_shipping_threshold=self._settings.get_decimal(FREE_SHIPPING_THRESHOLD),
            shipping_cost=self._settings.get_decimal(SHIPPING_COST),
        )

        customer = dto.customer
        order = self._order_repo.create(
            {
                "user": user if user is not None and user.is_authenticated else None,
                "customer_name": customer.name,
                "customer_email": customer.email,
                "customer_phone": customer.phone,
                "address_street": customer.street,
                "address_city": customer.city,
                "address_state": customer.state,
                "address_zip_code": customer.zip_code,
                "address_country": customer.country,
                "subtotal": totals.subtotal,
                "discount_amount": totals.discount_amount,
                "discount_type": coupon.discount_type if coupon else "",
                "coupon": coupon,
                "coupon_code": coupon.code if coupon else "",
                "shipping_cost": totals.shipping_cost,
                "tax_amount": totals.tax_amount,
                "total_amount": totals.total_amount,
                "payment_method": dto.payment_method,
                "payment_status": payment_status,
                "order_type": order_type,
                "notes": dto.notes,
                "idempotency_key": dto.idempotency_key,
                "items": lines,
            }
        )
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
            user=user,
        )

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            total_amount=str(order.total_amount),
        )
        self._schedule_notification(order)
        return self._order_repo.get_by_id(str(order.id)) or order

    def _reserve_stock(self, dto: CreateOrderDTO, log):
        lines: List[Dict[str, Any]] = []
        coupon_lines: List[CouponLine] = []
        subtotal = ZERO

        for item in sorted(dto.items, key=lambda i: str(i.product_id)):
            product = self._product_repo.get_for_update(str(item.product_id))
            if not product:
                raise ProductNotFound(f"Product {item.product_id} not found.")
            if not product.is_active:
                raise InactiveProduct(f"Product {product.name} is not available.")
            if product.stock_quantity < item.quantity:
                raise InsufficientStock(
                    f"Insufficient stock for {product.name}: requested "
                    f"{item.quantity}, available {product.stock_quantity}."
                )

            unit_price = product.selling_price
            product.stock_quantity -= item.quantity
            product.sales += item.quantity
            product.save(update_fields=["stock_quantity", "sales"])

            log.info(
                "order.stock_reserved",
                product_id=str(product.id),
                quantity=item.quantity,
                remaining=product.stock_quantity,
            )

            lines.append(
                {"product": product, "quantity": item.quantity, "unit_price": unit_price}
            )
            coupon_lines.append(
                CouponLine(product_id=product.id, category_id=product.category_id)
            )
            subtotal += unit_price * item.quantity

        return lines, coupon_lines, subtotal

    def _schedule_notification(self, order: Order) -> None:
        if not self._settings.get_setting(ORDER_NOTIFICATION_EMAIL):
            return
        from modules.orders.tasks import send_order_notification

        order_id = str(order.id)
        transaction.on_commit(lambda: send_order_notification.delay(order_id))

    # ------------------------------------------------------------------
    # Status management
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(
        self,
        order_id: UUID,
        new_status: str,
        notes: str = "",
        user=None,
    ) -> Order:
        """Transition an order to a new status.

        Cancellation goes through ``cancel_order`` so stock is released.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: transition is not allowed.
        """
        if new_status == OrderStatus.CANCELLED:
            return self.cancel_order(order_id, reason=notes, user=user)

        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(
            order_id=str(order_id),
            current_status=order.status,
            new_status=new_status,
        )

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}."
            )

        old_status = order.status
        order.status = new_status
        if new_status == OrderStatus.DELIVERED:
            order.delivered_at = timezone.now()
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
            user=user,
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order_id))

    @transaction.atomic
    def cancel_order(
        self,
        order_id: UUID,
        reason: str = "",
        user=None,
    ) -> Order:
        """Cancel an order, restock its items and give back the coupon use.

        Non-admin callers may only cancel orders that are still pending.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: cancellation not allowed from current status.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=str(order_id), current_status=order.status)

        if not order.can_transition_to(OrderStatus.CANCELLED):
            log.warning("order.cancel_not_allowed")
            raise InvalidOrderStatus(f"Cannot cancel order in status {order.status}.")
        if not is_admin(user) and order.status != OrderStatus.PENDING:
            log.warning("order.cancel_not_allowed", reason="not_pending")
            raise InvalidOrderStatus("Only pending orders can be cancelled.")

        for item in order.items.all().order_by("product_id"):
            self._order_repo.restock(item)
            log.info(
                "order.stock_released",
                product_id=str(item.product_id),
                quantity=item.quantity,
            )

        if order.coupon_id:
            self._coupons.release(order.coupon_id)

        old_status = order.status
        order.status = OrderStatus.CANCELLED
        order.cancelled_at = timezone.now()
        order.cancellation_reason = reason
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.CANCELLED,
            notes=reason or "Order cancelled",
            old_status=old_status,
            user=user,
        )

        log.info("order.cancelled")
        return self._order_repo.get_by_id(str(order_id))

    @transaction.atomic
    def update_payment(
        self,
        order_id: UUID,
        payment_status: Optional[str] = None,
        tracking_number: Optional[str] = None,
    ) -> Order:
        """Move the payment state machine and/or set the tracking number.

        Raises:
            OrderNotFound: order does not exist.
            InvalidPaymentStatus: payment transition is not allowed.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=str(order_id), payment_status=order.payment_status)

        if payment_status and payment_status != order.payment_status:
            if not order.can_change_payment_to(payment_status):
                log.warning("order.invalid_payment_transition", new=payment_status)
                raise InvalidPaymentStatus(
                    f"Cannot change payment from {order.payment_status} "
                    f"to {payment_status}."
                )
            order.payment_status = payment_status
        if tracking_number is not None:
            order.tracking_number = tracking_number

        self._order_repo.save(order)
        log.info("order.payment_updated", new=order.payment_status)
        return self._order_repo.get_by_id(str(order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Raises ``OrderNotFound`` if the order does not exist."""
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, user=None) -> models.QuerySet:
        """All orders for admins; a customer's own orders otherwise."""
        if is_admin(user):
            return self._order_repo.list()
        return self._order_repo.list({"user_id": getattr(user, "id", None)})


def get_order_service() -> OrderService:
    from modules.coupons.repositories.django_repository import CouponDjangoRepository
    from modules.coupons.services import CouponService
    from modules.orders.repositories.django_repository import OrderDjangoRepository
    from modules.products.repositories.django_repository import (
        ProductDjangoRepository,
    )
    from modules.store_settings.services import get_store_settings_service

    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
        coupon_service=CouponService(repository=CouponDjangoRepository()),
        settings_service=get_store_settings_service(),
    )
