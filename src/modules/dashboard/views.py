"""Admin dashboard endpoints (``/api/v1/admin/``)."""

from __future__ import annotations

from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.dashboard.serializers import LimitQuerySerializer, PeriodQuerySerializer
from modules.dashboard.services import DashboardService
from modules.orders.serializers import OrderListSerializer


class DashboardView(APIView):
    """GET /api/v1/admin/dashboard/"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        return Response(DashboardService().overview())


class RecentOrdersView(APIView):
    """GET /api/v1/admin/dashboard/recent-orders/?limit=5"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        query = LimitQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        orders = DashboardService().recent_orders(query.validated_data["limit"])
        return Response(OrderListSerializer(orders, many=True).data)


class TodaySummaryView(APIView):
    """GET /api/v1/admin/dashboard/today/"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        return Response(DashboardService().today())


class AnalyticsView(APIView):
    """GET /api/v1/admin/reports/analytics/?period=30"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        query = PeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(DashboardService().analytics(query.validated_data["period"]))


class SalesChartView(APIView):
    """GET /api/v1/admin/reports/sales-chart/?period=30"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        query = PeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(DashboardService().sales_chart(query.validated_data["period"]))
