import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Setting",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("key", models.CharField(max_length=100, unique=True)),
                ("value", models.TextField(blank=True, default="")),
                (
                    "value_type",
                    models.CharField(
                        choices=[
                            ("string", "String"),
                            ("number", "Number"),
                            ("boolean", "Boolean"),
                            ("object", "Object"),
                            ("array", "Array"),
                        ],
                        default="string",
                        max_length=10,
                    ),
                ),
                (
                    "description",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("general", "General"),
                            ("company", "Company"),
                            ("payment", "Payment"),
                            ("shipping", "Shipping"),
                            ("tax", "Tax"),
                            ("email", "Email"),
                        ],
                        default="general",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "db_table": "settings",
                "ordering": ["category", "key"],
                "indexes": [
                    models.Index(fields=["category"], name="settings_category_idx")
                ],
            },
        ),
    ]
