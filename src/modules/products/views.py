"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Storefront visitors read active products; admins manage the catalog.
Domain exceptions are caught and translated into HTTP status codes.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.categories.exceptions import CategoryNotFound
from modules.core.permissions import IsAdminOrReadOnly, is_admin
from modules.products.dtos import AdjustStockDTO, CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    InsufficientStock,
    InvalidDiscountPrice,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    ProductSerializer,
    ProductWriteSerializer,
    StockAdjustmentSerializer,
)
from modules.products.services import ProductService


def _not_found() -> Response:
    return Response(
        {"detail": "Product not found."},
        status=status.HTTP_404_NOT_FOUND,
    )


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for the product catalog.

    ``list`` / ``retrieve`` are public; everything else is admin only.
    Admins may pass ``include_inactive=true`` to list inactive products.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "sku", "description"]
    ordering_fields = ["name", "price", "stock_quantity", "sales", "views", "created_at"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_permissions(self):
        if self.action == "stats":
            return [IsAdminUser()]
        return super().get_permissions()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        include_inactive = (
            is_admin(self.request.user)
            and self.request.query_params.get("include_inactive") == "true"
        )
        return self._service.list_products(include_inactive=include_inactive)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/

        Visitors only see active products; each visitor read bumps ``views``.
        """
        admin = is_admin(request.user)
        try:
            product = self._service.get_product(pk, include_inactive=admin)
        except ProductNotFound:
            return _not_found()
        if not admin:
            product = self._service.record_view(product)
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/products/stats/"""
        return Response(self._service.get_stats())

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateProductDTO(**serializer.validated_data)
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.create_product(dto)
        except ProductAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )
        except CategoryNotFound as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/

        SKU is immutable; send ``discount_price: null`` to clear a discount.
        """
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop("sku", None)
        clear_discount = "discount_price" in data and data["discount_price"] is None

        try:
            dto = UpdateProductDTO(**data, clear_discount=clear_discount)
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return _not_found()
        except (CategoryNotFound, InvalidDiscountPrice) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        out = ProductSerializer(product)
        return Response(out.data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    @action(detail=True, methods=["patch"], url_path="stock")
    def update_stock(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/stock/

        Body: ``{"quantity": N, "operation": "add" | "subtract" | "set"}``.
        """
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = AdjustStockDTO(**serializer.validated_data)
        try:
            product = self._service.adjust_stock(pk, dto)
        except ProductNotFound:
            return _not_found()
        except InsufficientStock as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        out = ProductSerializer(product)
        return Response(out.data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)
