"""Django ORM implementation of the Setting repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.store_settings.models import Setting
from modules.store_settings.repositories.interfaces import ISettingRepository

logger = structlog.get_logger(__name__)


class SettingDjangoRepository(ISettingRepository):
    def get_by_id(self, id: str) -> Optional[Setting]:
        try:
            return Setting.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_key(self, key: str) -> Optional[Setting]:
        return Setting.objects.filter(key=key).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Setting.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def all(self) -> List[Setting]:
        return list(Setting.objects.all())

    @transaction.atomic
    def save(self, entity: Setting) -> Setting:
        entity.save()
        logger.info("setting.saved", key=entity.key)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Setting.objects.filter(id=id).delete()
        return deleted > 0
