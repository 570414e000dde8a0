"""
API views for the dashboard and the reports.

Report endpoints take either ``startDate``/``endDate`` (``YYYY-MM-DD``,
inclusive) or a ``period`` preset (daily, weekly, monthly, yearly).
"""

import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.core.date_ranges import resolve_report_range
from apps.sales.serializers import TransactionDetailSerializer

from . import services
from .serializers import (
    DashboardStatsSerializer,
    PaymentMethodBreakdownSerializer,
    PeriodSummarySerializer,
    VatBreakdownSerializer,
)

logger = logging.getLogger(__name__)


@api_view(["GET"])
def dashboard_stats(request):
    """Today's sales, transaction count, VAT collected and active clients."""
    stats = services.dashboard_stats()
    return Response(DashboardStatsSerializer(stats).data)


@api_view(["GET"])
def report_transactions(request):
    """Transactions of the requested range, latest sale first."""
    start, end = resolve_report_range(request.query_params)
    sales = services.transactions_in_range(start, end)
    logger.debug(f"Transactions report {start:%Y-%m-%d}..{end:%Y-%m-%d}: {len(sales)} rows")
    return Response(TransactionDetailSerializer(sales, many=True).data)


@api_view(["GET"])
def report_vat_breakdown(request):
    """Net base, VAT and gross per VAT rate."""
    start, end = resolve_report_range(request.query_params)
    return Response(VatBreakdownSerializer(services.vat_breakdown(start, end)).data)


@api_view(["GET"])
def report_payment_methods(request):
    """Gross sales per payment method."""
    start, end = resolve_report_range(request.query_params)
    return Response(
        PaymentMethodBreakdownSerializer(services.payment_method_breakdown(start, end)).data
    )


@api_view(["GET"])
def report_summary(request):
    """Gross, net and VAT totals with the transaction count and average ticket."""
    start, end = resolve_report_range(request.query_params)
    return Response(PeriodSummarySerializer(services.period_summary(start, end)).data)
