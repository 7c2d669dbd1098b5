"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsOwnerOrAdmin
from modules.coupons.exceptions import CouponNotApplicable, CouponNotFound
from modules.orders.dtos import CreateOrderDTO, CustomerInfoDTO
from modules.orders.exceptions import (
    InactiveProduct,
    InsufficientStock,
    InvalidOrderStatus,
    InvalidPaymentStatus,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.serializers import (
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    UpdatePaymentSerializer,
    UpdateStatusSerializer,
)
from modules.orders.services import get_order_service


def _not_found() -> Response:
    return Response(
        {"detail": "Order not found."},
        status=status.HTTP_404_NOT_FOUND,
    )


class OrderViewSet(GenericViewSet):
    """Checkout plus order management.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    search_fields = ["order_number", "customer_name", "customer_email", "customer_phone"]
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = get_order_service()

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        if self.action in {"pos", "partial_update", "payment"}:
            return [IsAdminUser()]
        if self.action in {"retrieve", "cancel"}:
            return [IsAuthenticated(), IsOwnerOrAdmin()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        throttle_scope: str | None
        if self.action in {"create", "pos"}:
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Order.objects.none()
        return self._service.list_orders(self.request.user)

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def _build_dto(self, request: Request) -> CreateOrderDTO:
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        customer = dict(data["customer"])
        address = customer.pop("address", None) or {}
        return CreateOrderDTO(
            customer=CustomerInfoDTO(**customer, **address),
            items=data["items"],
            coupon_code=data.get("coupon_code"),
            payment_method=data["payment_method"],
            notes=data.get("notes", ""),
            idempotency_key=request.headers.get("Idempotency-Key"),
        )

    def _place(self, request: Request, create) -> Response:
        try:
            dto = self._build_dto(request)
        except PydanticValidationError as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            order = create(dto, user=request.user)
        except ProductNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InactiveProduct as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except InsufficientStock as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except CouponNotFound:
            return Response(
                {"detail": "Invalid coupon code."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except CouponNotApplicable as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Guest checkout is allowed.  Supports idempotency via the
        ``Idempotency-Key`` header: a replayed key returns the original order.
        """
        return self._place(request, self._service.create_order)

    @action(detail=False, methods=["post"])
    def pos(self, request: Request) -> Response:
        """POST /api/v1/orders/pos/ (admin counter sale, paid immediately)."""
        return self._place(request, self._service.create_pos_order)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Admins see every order; customers see their own.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return _not_found()
        self.check_object_permissions(request, order)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status / payment / cancel
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/ with ``{"status", "notes"?}``."""
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                order_id=pk,
                new_status=serializer.validated_data["status"],
                notes=serializer.validated_data["notes"],
                user=request.user,
            )
        except OrderNotFound:
            return _not_found()
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Admins may cancel any open order; customers only their own pending
        ones.  Stock and the coupon use are given back.
        """
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return _not_found()
        self.check_object_permissions(request, order)

        try:
            order = self._service.cancel_order(
                order_id=pk,
                reason=serializer.validated_data["reason"],
                user=request.user,
            )
        except OrderNotFound:
            return _not_found()
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["patch"])
    def payment(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/payment/"""
        serializer = UpdatePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_payment(
                order_id=pk,
                payment_status=serializer.validated_data.get("payment_status"),
                tracking_number=serializer.validated_data.get("tracking_number"),
            )
        except OrderNotFound:
            return _not_found()
        except InvalidPaymentStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)
