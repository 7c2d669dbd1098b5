"""Store settings URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.store_settings.views import (
    SettingDetailView,
    SettingsInitView,
    SettingsView,
)

urlpatterns = [
    path("settings/", SettingsView.as_view(), name="settings"),
    path("settings/init/", SettingsInitView.as_view(), name="settings-init"),
    path("settings/<str:key>/", SettingDetailView.as_view(), name="setting-detail"),
]
