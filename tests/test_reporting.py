"""
Tests for reporting: date range helpers, the aggregation services and the
dashboard/report endpoints.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.utils import timezone

import pytest

from apps.core import date_ranges
from apps.core.exceptions import ValidationError
from apps.crm.models import Client
from apps.reporting import services
from apps.sales.models import TransactionItem


def local_dt(year, month, day, hour=12, minute=0, second=0, microsecond=0):
    return timezone.make_aware(datetime(year, month, day, hour, minute, second, microsecond))


class TestDateRanges:
    """Test query date parsing and day boundaries."""

    def test_day_bounds_cover_whole_days(self):
        start, end = date_ranges.day_bounds(date(2024, 3, 1), date(2024, 3, 31))

        assert timezone.localtime(start).time() == time.min
        assert timezone.localtime(end).time() == time.max
        assert timezone.localtime(end).date() == date(2024, 3, 31)

    def test_single_day_range(self):
        start, end = date_ranges.day_bounds(date(2024, 3, 1), date(2024, 3, 1))
        assert end - start == timedelta(days=1) - timedelta(microseconds=1)

    def test_start_after_end(self):
        with pytest.raises(ValidationError):
            date_ranges.day_bounds(date(2024, 3, 2), date(2024, 3, 1))

    @pytest.mark.parametrize("value", [None, "", "undefined", "null"])
    def test_missing_date(self, value):
        with pytest.raises(ValidationError) as exc_info:
            date_ranges.parse_query_date(value, "startDate")
        assert exc_info.value.message == "Valid start and end dates are required"

    @pytest.mark.parametrize("value", ["2024-02-30", "15/03/2024", "yesterday"])
    def test_invalid_date(self, value):
        with pytest.raises(ValidationError) as exc_info:
            date_ranges.parse_query_date(value, "endDate")
        assert "endDate" in exc_info.value.errors

    def test_today_window_is_half_open(self):
        now = local_dt(2024, 3, 15, 18, 45)

        start, end = date_ranges.today_window(now)

        assert start == local_dt(2024, 3, 15, 0, 0)
        assert end == local_dt(2024, 3, 16, 0, 0)

    @pytest.mark.parametrize(
        "period,expected",
        [
            ("daily", (date(2024, 2, 14), date(2024, 2, 14))),
            ("weekly", (date(2024, 2, 12), date(2024, 2, 18))),
            ("monthly", (date(2024, 2, 1), date(2024, 2, 29))),
            ("yearly", (date(2024, 1, 1), date(2024, 12, 31))),
        ],
    )
    def test_presets(self, period, expected):
        assert date_ranges.preset_range(period, today=date(2024, 2, 14)) == expected

    def test_december_month_preset(self):
        assert date_ranges.preset_range("monthly", today=date(2023, 12, 5)) == (
            date(2023, 12, 1),
            date(2023, 12, 31),
        )

    def test_unknown_preset(self):
        with pytest.raises(ValidationError):
            date_ranges.preset_range("hourly")

    def test_resolve_prefers_preset(self):
        start, end = date_ranges.resolve_report_range(
            {"period": "weekly", "startDate": "2020-01-01", "endDate": "2020-01-02"},
            today=date(2024, 2, 14),
        )
        assert timezone.localtime(start).date() == date(2024, 2, 12)
        assert timezone.localtime(end).date() == date(2024, 2, 18)

    @pytest.mark.parametrize("period", ["custom", "undefined", ""])
    def test_resolve_falls_back_to_dates(self, period):
        start, end = date_ranges.resolve_report_range(
            {"period": period, "startDate": "2024-01-01", "endDate": "2024-01-31"}
        )
        assert timezone.localtime(start).date() == date(2024, 1, 1)
        assert timezone.localtime(end).date() == date(2024, 1, 31)


@pytest.mark.django_db
class TestReportingServices:
    """Test aggregation over stored transactions."""

    @pytest.fixture
    def march_sales(self, make_sale):
        """Three March sales plus one on each side of the month."""
        make_sale([("Coffee", 2, "1.50", 10), ("Cake", 1, "2.50", 10)], local_dt(2024, 3, 1, 0, 0))
        make_sale(
            [("Wine", 1, "12.10", 21), ("Bread", 2, "1.04", 4)],
            local_dt(2024, 3, 15, 13, 0),
            payment_method="card",
        )
        make_sale([("Book", 1, "20.80", 4)], local_dt(2024, 3, 31, 23, 59, 59, 999999), "transfer")
        make_sale([("Coffee", 1, "1.50", 10)], local_dt(2024, 2, 29, 23, 59, 59))
        make_sale([("Coffee", 1, "1.50", 10)], local_dt(2024, 4, 1, 0, 0))

    def _march(self):
        return date_ranges.day_bounds(date(2024, 3, 1), date(2024, 3, 31))

    def test_transactions_in_range(self, march_sales):
        sales = services.transactions_in_range(*self._march())

        assert len(sales) == 3
        assert [sale.payment_method for sale in sales] == ["transfer", "card", "cash"]

    def test_vat_breakdown(self, march_sales):
        breakdown = services.vat_breakdown(*self._march())

        assert breakdown["vat10"] == (Decimal("5.00"), Decimal("0.50"), Decimal("5.50"))
        assert breakdown["vat21"] == (Decimal("10.00"), Decimal("2.10"), Decimal("12.10"))
        # Bread 2.08 -> 2.00 + 0.08, Book 20.80 -> 20.00 + 0.80
        assert breakdown["vat4"] == (Decimal("22.00"), Decimal("0.88"), Decimal("22.88"))

    def test_vat_breakdown_matches_item_sums(self, march_sales):
        breakdown = services.vat_breakdown(*self._march())
        start, end = self._march()
        items = TransactionItem.objects.filter(transaction__sale_date__range=(start, end))

        assert sum(bucket.total for bucket in breakdown.values()) == sum(i.total for i in items)
        assert sum(bucket.vat for bucket in breakdown.values()) == sum(
            i.vat_amount for i in items
        )

    def test_empty_range_gives_zero_buckets(self):
        start, end = date_ranges.day_bounds(date(2030, 1, 1), date(2030, 1, 31))

        breakdown = services.vat_breakdown(start, end)
        methods = services.payment_method_breakdown(start, end)

        assert set(breakdown) == {"vat21", "vat10", "vat4"}
        assert all(bucket == (Decimal("0.00"),) * 3 for bucket in breakdown.values())
        assert methods == {
            "cash": Decimal("0.00"),
            "card": Decimal("0.00"),
            "transfer": Decimal("0.00"),
        }

    def test_payment_method_breakdown(self, march_sales):
        methods = services.payment_method_breakdown(*self._march())

        assert methods == {
            "cash": Decimal("5.50"),
            "card": Decimal("14.18"),
            "transfer": Decimal("20.80"),
        }

    def test_period_summary(self, march_sales):
        summary = services.period_summary(*self._march())

        assert summary.transaction_count == 3
        assert summary.gross_sales == Decimal("40.48")
        assert summary.net_sales == Decimal("37.00")
        assert summary.total_vat == Decimal("3.48")
        assert summary.average_ticket == Decimal("13.49")

    def test_period_summary_without_sales(self):
        start, end = date_ranges.day_bounds(date(2030, 1, 1), date(2030, 1, 1))

        summary = services.period_summary(start, end)

        assert summary.transaction_count == 0
        assert summary.gross_sales == Decimal("0.00")
        assert summary.average_ticket == Decimal("0.00")

    def test_dashboard_stats_today_window(self, make_sale, shop_client):
        """Only sales in [today 00:00, tomorrow 00:00) count."""
        now = local_dt(2024, 3, 15, 18, 0)
        make_sale([("Coffee", 2, "1.50", 10)], local_dt(2024, 3, 15, 0, 0))
        make_sale([("Wine", 1, "12.10", 21)], local_dt(2024, 3, 15, 23, 59, 59), "card")
        make_sale([("Cake", 1, "2.50", 10)], local_dt(2024, 3, 14, 23, 59, 59))
        make_sale([("Cake", 1, "2.50", 10)], local_dt(2024, 3, 16, 0, 0))
        Client.objects.create(name="Dormant", is_active=False)

        stats = services.dashboard_stats(now=now)

        assert stats.today_transactions == 2
        assert stats.today_sales == Decimal("15.10")
        assert stats.vat_collected == Decimal("2.37")
        assert stats.active_clients == 2


@pytest.mark.django_db
class TestReportingAPI:
    """Test the dashboard and report endpoints."""

    def test_dashboard_stats(self, api_client, make_sale):
        make_sale([("Coffee", 2, "1.50", 10)])

        response = api_client.get("/api/dashboard/stats")

        assert response.status_code == 200
        assert response.data == {
            "todaySales": "3.00",
            "todayTransactions": 1,
            "vatCollected": "0.27",
            "activeClients": 1,
        }

    def test_vat_breakdown_endpoint(self, api_client, make_sale):
        make_sale([("Wine", 1, "12.10", 21)], local_dt(2024, 3, 15))

        response = api_client.get(
            "/api/reports/vat-breakdown", {"startDate": "2024-03-15", "endDate": "2024-03-15"}
        )

        assert response.status_code == 200
        assert response.data["vat21"] == {"base": "10.00", "vat": "2.10", "total": "12.10"}
        assert response.data["vat4"] == {"base": "0.00", "vat": "0.00", "total": "0.00"}

    def test_payment_methods_endpoint(self, api_client, make_sale):
        make_sale([("Wine", 1, "12.10", 21)], local_dt(2024, 3, 15), "card")

        response = api_client.get(
            "/api/reports/payment-methods", {"startDate": "2024-03-01", "endDate": "2024-03-31"}
        )

        assert response.status_code == 200
        assert response.data == {"cash": "0.00", "card": "12.10", "transfer": "0.00"}

    def test_transactions_endpoint(self, api_client, make_sale):
        make_sale([("Coffee", 1, "1.50", 10)], local_dt(2024, 3, 10))
        make_sale([("Coffee", 1, "1.50", 10)], local_dt(2024, 3, 20))
        make_sale([("Coffee", 1, "1.50", 10)], local_dt(2024, 4, 2))

        response = api_client.get(
            "/api/reports/transactions", {"startDate": "2024-03-01", "endDate": "2024-03-31"}
        )

        assert response.status_code == 200
        assert len(response.data) == 2
        assert response.data[0]["saleDate"] > response.data[1]["saleDate"]

    def test_summary_endpoint_with_preset(self, api_client, make_sale):
        make_sale([("Coffee", 2, "1.50", 10)])

        response = api_client.get("/api/reports/summary", {"period": "daily"})

        assert response.status_code == 200
        assert response.data == {
            "grossSales": "3.00",
            "netSales": "2.73",
            "totalVat": "0.27",
            "transactionCount": 1,
            "averageTicket": "3.00",
        }

    @pytest.mark.parametrize(
        "url",
        [
            "/api/reports/transactions",
            "/api/reports/vat-breakdown",
            "/api/reports/payment-methods",
            "/api/reports/summary",
        ],
    )
    def test_reports_require_dates(self, api_client, url):
        response = api_client.get(url, {"startDate": "undefined", "endDate": "2024-03-31"})

        assert response.status_code == 400
        assert response.data["message"] == "Valid start and end dates are required"

    def test_reports_reject_inverted_range(self, api_client):
        response = api_client.get(
            "/api/reports/vat-breakdown", {"startDate": "2024-03-31", "endDate": "2024-03-01"}
        )
        assert response.status_code == 400

    def test_reports_reject_unknown_period(self, api_client):
        response = api_client.get("/api/reports/summary", {"period": "fortnightly"})

        assert response.status_code == 400
        assert "period" in response.data["errors"]
