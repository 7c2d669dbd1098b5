"""Asynchronous tasks of the orders module."""

import structlog
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from modules.store_settings.constants import ADMIN_EMAIL
from modules.store_settings.services import get_store_settings_service

logger = structlog.get_logger(__name__)


def _render_summary(order) -> str:
    lines = [
        f"Order {order.order_number}",
        f"Customer: {order.customer_name} <{order.customer_email}> {order.customer_phone}",
        "",
    ]
    for item in order.items.all():
        lines.append(
            f"  {item.product_name} ({item.product_sku}) x{item.quantity} = {item.subtotal}"
        )
    lines += [
        "",
        f"Subtotal: {order.subtotal}",
        f"Discount: {order.discount_amount}",
        f"Shipping: {order.shipping_cost}",
        f"Tax: {order.tax_amount}",
        f"Total: {order.total_amount}",
        f"Payment: {order.payment_method} ({order.payment_status})",
    ]
    return "\n".join(lines)


@shared_task(
    name="orders.send_order_notification",
    autoretry_for=(OSError,),
    retry_backoff=True,
    max_retries=3,
)
def send_order_notification(order_id: str) -> bool:
    """E-mail the store admin a summary of a newly placed order."""
    from modules.orders.models import Order

    order = Order.objects.prefetch_related("items").filter(id=order_id).first()
    if order is None:
        logger.warning("order.notification_skipped", order_id=order_id, reason="missing")
        return False

    recipient = get_store_settings_service().get_setting(ADMIN_EMAIL)
    if not recipient:
        logger.warning("order.notification_skipped", order_id=order_id, reason="no_admin_email")
        return False

    send_mail(
        subject=f"New order {order.order_number} - {order.total_amount}",
        message=_render_summary(order),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient],
    )
    logger.info(
        "order.notification_sent",
        order_id=order_id,
        order_number=order.order_number,
    )
    return True
