"""Store settings DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.store_settings.constants import SettingCategory, SettingType
from modules.store_settings.models import Setting


class SettingSerializer(serializers.ModelSerializer):
    """Full record, admin only."""

    typed_value = serializers.SerializerMethodField()

    class Meta:
        model = Setting
        fields = [
            "id",
            "key",
            "value",
            "typed_value",
            "value_type",
            "category",
            "description",
            "updated_at",
        ]
        read_only_fields = fields

    def get_typed_value(self, obj: Setting):
        return obj.typed_value


class BulkUpdateSettingsSerializer(serializers.Serializer):
    settings = serializers.DictField(allow_empty=False)


class UpsertSettingSerializer(serializers.Serializer):
    value = serializers.JSONField()
    value_type = serializers.ChoiceField(choices=SettingType.choices, required=False)
    category = serializers.ChoiceField(choices=SettingCategory.choices, required=False)
    description = serializers.CharField(
        max_length=255, required=False, allow_blank=True
    )
