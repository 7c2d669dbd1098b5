from django.apps import AppConfig


class StoreSettingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.store_settings"
    label = "store_settings"
    verbose_name = "Store settings"
