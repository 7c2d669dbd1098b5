"""Coupon API views.

``POST /api/v1/coupons/validate/`` is public; everything else is admin only.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.coupons.dtos import CreateCouponDTO, UpdateCouponDTO, ValidateCouponDTO
from modules.coupons.exceptions import (
    CouponAlreadyExists,
    CouponNotApplicable,
    CouponNotFound,
    InvalidCoupon,
)
from modules.coupons.filters import CouponFilter
from modules.coupons.models import Coupon
from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.coupons.serializers import (
    CouponSerializer,
    CouponWriteSerializer,
    ValidateCouponSerializer,
)
from modules.coupons.services import CouponService


def _not_found() -> Response:
    return Response(
        {"detail": "Coupon not found."},
        status=status.HTTP_404_NOT_FOUND,
    )


class CouponViewSet(ListModelMixin, GenericViewSet):
    queryset = Coupon.objects.all()
    serializer_class = CouponSerializer
    permission_classes = [IsAdminUser]
    filterset_class = CouponFilter
    search_fields = ["code", "name", "description"]
    ordering_fields = ["created_at", "end_date", "used_count", "code"]
    ordering = ["-created_at"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CouponService(repository=CouponDjangoRepository())

    def get_permissions(self):
        if self.action == "validate":
            return [AllowAny()]
        return super().get_permissions()

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "coupon_validation" if self.action == "validate" else None
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_coupons()

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"])
    def validate(self, request: Request) -> Response:
        """POST /api/v1/coupons/validate/

        Body: ``{"code", "order_amount", "items"?: [{"product_id", "quantity"}]}``.
        """
        serializer = ValidateCouponSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = ValidateCouponDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            quote = self._service.quote(dto)
        except CouponNotFound:
            return Response(
                {"detail": "Invalid coupon code."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except CouponNotApplicable as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        coupon = quote.coupon
        return Response(
            {
                "code": coupon.code,
                "name": coupon.name,
                "discount_type": coupon.discount_type,
                "value": str(coupon.value),
                "discount": str(quote.discount),
                "final_amount": str(dto.order_amount - quote.discount),
            }
        )

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/coupons/stats/"""
        return Response(self._service.get_stats())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            coupon = self._service.get_coupon(pk)
        except CouponNotFound:
            return _not_found()
        return Response(CouponSerializer(coupon).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/coupons/"""
        serializer = CouponWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateCouponDTO(**serializer.validated_data)
        except (PydanticValidationError, ValueError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            coupon = self._service.create_coupon(dto, created_by=request.user)
        except CouponAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except InvalidCoupon as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CouponSerializer(coupon).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/coupons/{pk}/ (code is immutable)."""
        serializer = CouponWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop("code", None)

        try:
            dto = UpdateCouponDTO(**data)
            coupon = self._service.update_coupon(pk, dto)
        except (PydanticValidationError, InvalidCoupon) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except CouponNotFound:
            return _not_found()

        return Response(CouponSerializer(coupon).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        try:
            self._service.delete_coupon(pk)
        except CouponNotFound:
            return _not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)
