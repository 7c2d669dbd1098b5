"""Category API views.

Reads are public (active categories only unless an admin asks for
``include_inactive=true``); writes are admin only.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.categories.dtos import CreateCategoryDTO, UpdateCategoryDTO
from modules.categories.exceptions import (
    CategoryAlreadyExists,
    CategoryInUse,
    CategoryNotFound,
)
from modules.categories.filters import CategoryFilter
from modules.categories.models import Category
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.serializers import CategorySerializer, CategoryWriteSerializer
from modules.categories.services import CategoryService
from modules.core.permissions import IsAdminOrReadOnly, is_admin


class CategoryViewSet(ListModelMixin, GenericViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = CategoryFilter
    search_fields = ["name", "description"]
    ordering_fields = ["name", "sort_order", "created_at"]
    ordering = ["sort_order", "name"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService(repository=CategoryDjangoRepository())

    def _include_inactive(self) -> bool:
        return (
            is_admin(self.request.user)
            and self.request.query_params.get("include_inactive") == "true"
        )

    def get_queryset(self):
        return self._service.list_categories(include_inactive=self._include_inactive())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/categories/{pk}/"""
        try:
            category = self._service.get_category(
                pk, include_inactive=is_admin(request.user)
            )
        except CategoryNotFound:
            return Response(
                {"detail": "Category not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(CategorySerializer(category).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/categories/"""
        serializer = CategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateCategoryDTO(**serializer.validated_data)
            category = self._service.create_category(dto)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except CategoryAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/categories/{pk}/"""
        serializer = CategoryWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateCategoryDTO(**serializer.validated_data)
            category = self._service.update_category(pk, dto)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except CategoryNotFound:
            return Response(
                {"detail": "Category not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except CategoryAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(CategorySerializer(category).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/categories/{pk}/"""
        try:
            self._service.delete_category(pk)
        except CategoryNotFound:
            return Response(
                {"detail": "Category not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except CategoryInUse as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)
