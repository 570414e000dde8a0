"""
Date range helpers shared by the reporting and dashboard endpoints.

Query strings carry plain ``YYYY-MM-DD`` dates; they are expanded here to
timezone-aware day boundaries in the configured local time zone.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from django.utils import timezone

from apps.core.exceptions import ValidationError

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"
CUSTOM = "custom"

PERIOD_CHOICES = (DAILY, WEEKLY, MONTHLY, YEARLY, CUSTOM)

# Query values the single-page client sends when a date input is empty.
_MISSING_VALUES = ("", "undefined", "null")


def parse_query_date(value: Optional[str], name: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` query parameter.

    Raises:
        ValidationError: If the value is missing or not a calendar date.
    """
    if value is None or value.strip() in _MISSING_VALUES:
        raise ValidationError(
            "Valid start and end dates are required",
            errors={name: ["This parameter is required."]},
        )
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(
            "Invalid dates",
            errors={name: [f"'{value}' is not a valid YYYY-MM-DD date."]},
        )


def start_of_day(day: date) -> datetime:
    """Return the aware datetime for 00:00:00 of ``day`` in the local time zone."""
    return timezone.make_aware(datetime.combine(day, time.min))


def end_of_day(day: date) -> datetime:
    """Return the aware datetime for the last microsecond of ``day``."""
    return timezone.make_aware(datetime.combine(day, time.max))


def day_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    """
    Expand an inclusive date range to ``[start 00:00, end 23:59:59.999999]``.

    Raises:
        ValidationError: If ``start`` falls after ``end``.
    """
    if start > end:
        raise ValidationError(
            "Start date must not be after end date",
            errors={"startDate": ["Must be on or before endDate."]},
        )
    return start_of_day(start), end_of_day(end)


def today_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return the half-open ``[today 00:00, tomorrow 00:00)`` window for ``now``."""
    now = now or timezone.now()
    today = timezone.localtime(now).date()
    start = start_of_day(today)
    return start, start_of_day(today + timedelta(days=1))


def preset_range(period: str, today: Optional[date] = None) -> Tuple[date, date]:
    """
    Resolve a report period preset to an inclusive ``(start, end)`` date pair.

    Weeks run Monday to Sunday.
    """
    today = today or timezone.localdate()

    if period == DAILY:
        return today, today
    if period == WEEKLY:
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if period == MONTHLY:
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return first, next_month - timedelta(days=1)
    if period == YEARLY:
        return date(today.year, 1, 1), date(today.year, 12, 31)

    raise ValidationError(
        "Unknown report period",
        errors={"period": [f"Must be one of: {', '.join(PERIOD_CHOICES)}."]},
    )


def resolve_report_range(params, today: Optional[date] = None) -> Tuple[datetime, datetime]:
    """
    Build the aware datetime bounds for a report request.

    ``params`` is a query dict. A ``period`` preset other than ``custom`` wins
    over explicit dates; otherwise ``startDate`` and ``endDate`` are required.
    """
    period = (params.get("period") or "").strip().lower()
    if period not in _MISSING_VALUES and period != CUSTOM:
        start, end = preset_range(period, today=today)
    else:
        start = parse_query_date(params.get("startDate"), "startDate")
        end = parse_query_date(params.get("endDate"), "endDate")
    return day_bounds(start, end)
