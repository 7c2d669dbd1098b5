"""Product category.

- ``name`` is unique (case-insensitive at the service layer).
- ``slug`` is derived from the name; collisions get a numeric suffix.
- Deleting a category that still holds products is refused by the service.
"""

from __future__ import annotations

import structlog
from django.db import models
from django.utils.text import slugify

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)

SLUG_MAX_LENGTH = 60


class Category(BaseModel):
    name = models.CharField(max_length=50, unique=True)
    slug = models.SlugField(max_length=SLUG_MAX_LENGTH, unique=True)
    description = models.CharField(max_length=200, blank=True, default="")
    image_url = models.URLField(max_length=500, blank=True, default="")
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "categories"
        ordering = ["sort_order", "name"]
        verbose_name_plural = "categories"
        indexes = [
            models.Index(fields=["is_active", "sort_order"], name="categories_active_idx"),
        ]

    # ------------------------------------------------------------------
    # Slug generation
    # ------------------------------------------------------------------

    def generate_slug(self) -> str:
        """Slug from ``name``; appends ``-1``, ``-2``... until unique."""
        base = slugify(self.name)[: SLUG_MAX_LENGTH - 4] or "category"
        candidate = base
        suffix = 1
        others = Category.objects.exclude(pk=self.pk)
        while others.filter(slug=candidate).exists():
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def save(self, *args, **kwargs) -> None:
        if not self.slug:
            self.slug = self.generate_slug()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.name
