"""Coupon constants."""

from django.db import models


class DiscountType(models.TextChoices):
    PERCENTAGE = "percentage", "Percentage"
    FIXED = "fixed", "Fixed amount"


CODE_MAX_LENGTH = 20
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
MAX_PERCENTAGE = 100
