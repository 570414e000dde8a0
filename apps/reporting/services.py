"""
Reporting services for the POS back office.

Every figure is recomputed from the stored transaction and item rows on each
call; nothing is cached. Date bounds are aware datetimes produced by
``apps.core.date_ranges``.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, NamedTuple, Optional

from django.db.models import Count, Sum

from apps.core.date_ranges import today_window
from apps.crm.models import Client
from apps.sales.models import Transaction, TransactionItem
from apps.sales.services import sale_queryset
from apps.sales.vat import VAT_GENERAL, VAT_REDUCED, VAT_SUPER_REDUCED, ZERO, quantize_money

logger = logging.getLogger(__name__)

# Report bucket key for each supported VAT rate.
VAT_BUCKETS = {
    VAT_GENERAL: "vat21",
    VAT_REDUCED: "vat10",
    VAT_SUPER_REDUCED: "vat4",
}


class VatBucket(NamedTuple):
    base: Decimal
    vat: Decimal
    total: Decimal


class PeriodSummary(NamedTuple):
    gross_sales: Decimal
    net_sales: Decimal
    total_vat: Decimal
    transaction_count: int
    average_ticket: Decimal


class DashboardStats(NamedTuple):
    today_sales: Decimal
    today_transactions: int
    vat_collected: Decimal
    active_clients: int


def transactions_in_range(start: datetime, end: datetime) -> List[Transaction]:
    """Transactions whose sale date falls in ``[start, end]``, latest sale first."""
    return list(sale_queryset().filter(sale_date__range=(start, end)).order_by("-sale_date"))


def vat_breakdown(start: datetime, end: datetime) -> Dict[str, VatBucket]:
    """
    Group item net base, VAT and gross by VAT rate.

    Always returns the ``vat21``, ``vat10`` and ``vat4`` buckets; a rate with
    no sales yields a zero bucket.
    """
    sums = {key: [ZERO, ZERO, ZERO] for key in VAT_BUCKETS.values()}

    rows = TransactionItem.objects.filter(transaction__sale_date__range=(start, end)).values_list(
        "vat_rate", "subtotal", "vat_amount", "total"
    )
    for vat_rate, subtotal, vat_amount, total in rows:
        key = VAT_BUCKETS.get(vat_rate)
        if key is None:
            logger.warning(f"Skipping item with unsupported VAT rate {vat_rate} in VAT breakdown")
            continue
        bucket = sums[key]
        bucket[0] += subtotal
        bucket[1] += vat_amount
        bucket[2] += total

    return {
        key: VatBucket(*(quantize_money(value) for value in values))
        for key, values in sums.items()
    }


def payment_method_breakdown(start: datetime, end: datetime) -> Dict[str, Decimal]:
    """Sum transaction totals per payment method; always ``cash``, ``card`` and ``transfer``."""
    sums = {method: ZERO for method in Transaction.PAYMENT_METHODS}

    rows = Transaction.objects.filter(sale_date__range=(start, end)).values_list(
        "payment_method", "total"
    )
    for payment_method, total in rows:
        if payment_method not in sums:
            logger.warning(f"Skipping transaction with unknown payment method {payment_method!r}")
            continue
        sums[payment_method] += total

    return {method: quantize_money(value) for method, value in sums.items()}


def period_summary(start: datetime, end: datetime) -> PeriodSummary:
    """Gross, net and VAT totals of the range with the transaction count and average ticket."""
    totals = Transaction.objects.filter(sale_date__range=(start, end)).aggregate(
        gross=Sum("total"),
        net=Sum("subtotal"),
        vat=Sum("vat_amount"),
        count=Count("id"),
    )

    count = totals["count"]
    gross = quantize_money(totals["gross"] or ZERO)
    average = quantize_money(gross / count) if count else quantize_money(ZERO)

    return PeriodSummary(
        gross_sales=gross,
        net_sales=quantize_money(totals["net"] or ZERO),
        total_vat=quantize_money(totals["vat"] or ZERO),
        transaction_count=count,
        average_ticket=average,
    )


def dashboard_stats(now: Optional[datetime] = None) -> DashboardStats:
    """
    Today's sales snapshot.

    Uses the half-open ``[today 00:00, tomorrow 00:00)`` window in the local
    time zone. ``activeClients`` counts every active client regardless of date.
    """
    start, end = today_window(now)
    totals = Transaction.objects.filter(sale_date__gte=start, sale_date__lt=end).aggregate(
        sales=Sum("total"),
        vat=Sum("vat_amount"),
        count=Count("id"),
    )

    return DashboardStats(
        today_sales=quantize_money(totals["sales"] or ZERO),
        today_transactions=totals["count"],
        vat_collected=quantize_money(totals["vat"] or ZERO),
        active_clients=Client.objects.filter(is_active=True).count(),
    )
