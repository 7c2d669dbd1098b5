from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("modules.core.urls")),
    # Domain modules (versioned API)
    path("api/v1/auth/", include("modules.accounts.urls")),
    path("api/v1/", include("modules.categories.urls")),
    path("api/v1/", include("modules.products.urls")),
    path("api/v1/", include("modules.coupons.urls")),
    path("api/v1/", include("modules.store_settings.urls")),
    path("api/v1/", include("modules.orders.urls")),
    path("api/v1/admin/", include("modules.dashboard.urls")),
    # OpenAPI schema & docs (public)
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
