"""Store settings API views.

- ``GET  /api/v1/settings/``           public map (``?category=``), no e-mail keys
- ``PUT  /api/v1/settings/``           admin bulk update of existing keys
- ``POST /api/v1/settings/init/``      admin, insert missing defaults
- ``GET  /api/v1/settings/{key}/``     admin, full record
- ``PUT  /api/v1/settings/{key}/``     admin, upsert a single key
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.permissions import is_admin
from modules.store_settings.constants import SettingCategory
from modules.store_settings.exceptions import InvalidSettingValue, SettingNotFound
from modules.store_settings.serializers import (
    BulkUpdateSettingsSerializer,
    SettingSerializer,
    UpsertSettingSerializer,
)
from modules.store_settings.services import get_store_settings_service


class SettingsView(APIView):
    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAdminUser()]

    def get(self, request: Request) -> Response:
        service = get_store_settings_service()
        category = request.query_params.get("category")
        if category and category not in SettingCategory.values:
            return Response(
                {"detail": f"Unknown category '{category}'."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if is_admin(request.user) and request.query_params.get("all") == "true":
            data = (
                service.get_by_category(category) if category else service.get_all()
            )
        else:
            data = service.get_public(category)
        return Response(data)

    def put(self, request: Request) -> Response:
        serializer = BulkUpdateSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            updated = get_store_settings_service().bulk_update(
                serializer.validated_data["settings"]
            )
        except SettingNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidSettingValue as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(updated)


class SettingsInitView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request: Request) -> Response:
        created = get_store_settings_service().initialize_defaults()
        return Response({"created": created}, status=status.HTTP_200_OK)


class SettingDetailView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request: Request, key: str) -> Response:
        try:
            setting = get_store_settings_service().get_record(key)
        except SettingNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(SettingSerializer(setting).data)

    def put(self, request: Request, key: str) -> Response:
        serializer = UpsertSettingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            setting = get_store_settings_service().set_setting(
                key,
                data["value"],
                value_type=data.get("value_type"),
                category=data.get("category"),
                description=data.get("description"),
            )
        except InvalidSettingValue as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(SettingSerializer(setting).data)
