"""Product catalog constants."""

from django.db import models


class ProductStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class ProductUnit(models.TextChoices):
    PIECE = "piece", "Piece"
    PACKET = "packet", "Packet"
    BOX = "box", "Box"
    KG = "kg", "Kilogram"
    GRAM = "gram", "Gram"


class StockStatus(models.TextChoices):
    IN_STOCK = "in-stock", "In stock"
    LOW_STOCK = "low-stock", "Low stock"
    OUT_OF_STOCK = "out-of-stock", "Out of stock"


class StockOperation(models.TextChoices):
    ADD = "add", "Add"
    SUBTRACT = "subtract", "Subtract"
    SET = "set", "Set"


LOW_STOCK_THRESHOLD = 5

MAX_TAGS = 20
