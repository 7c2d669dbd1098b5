from django.urls import path

from modules.dashboard.views import (
    AnalyticsView,
    DashboardView,
    RecentOrdersView,
    SalesChartView,
    TodaySummaryView,
)

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="admin-dashboard"),
    path(
        "dashboard/recent-orders/",
        RecentOrdersView.as_view(),
        name="admin-dashboard-recent-orders",
    ),
    path("dashboard/today/", TodaySummaryView.as_view(), name="admin-dashboard-today"),
    path("reports/analytics/", AnalyticsView.as_view(), name="admin-reports-analytics"),
    path(
        "reports/sales-chart/",
        SalesChartView.as_view(),
        name="admin-reports-sales-chart",
    ),
]
