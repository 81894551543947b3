"""Period partitioning, labels and date-range presets."""

from __future__ import annotations

import enum
import re
from datetime import date, datetime, timedelta

from bookkeeping.constants.error_ids import ErrorIds
from bookkeeping.logger import get_logger
from bookkeeping.models import DateRange, Granularity, Period
from bookkeeping.utils.exceptions import ReportError

logger = get_logger(__name__)

_MONTH_KEY = re.compile(r"^(\d{4})-(\d{2})$")
_QUARTER_KEY = re.compile(r"^(\d{4})-Q([1-4])$")


class DateRangePreset(str, enum.Enum):
    """Named ranges offered by the report period selector."""

    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    LAST_4_MONTHS = "last_4_months"
    LAST_12_MONTHS = "last_12_months"
    THIS_QUARTER = "this_quarter"
    LAST_QUARTER = "last_quarter"
    THIS_YEAR = "this_year"
    LAST_YEAR = "last_year"
    THIS_YEAR_TO_LAST_MONTH = "this_year_to_last_month"
    THIS_YEAR_TO_TODAY = "this_year_to_today"


def as_calendar_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _month_start(value: date) -> date:
    return value.replace(day=1)


def _month_end(value: date) -> date:
    next_month = value.replace(day=28) + timedelta(days=4)
    return next_month.replace(day=1) - timedelta(days=1)


def _quarter_number(value: date) -> int:
    return (value.month - 1) // 3 + 1


def _quarter_start(value: date) -> date:
    month = (_quarter_number(value) - 1) * 3 + 1
    return date(year=value.year, month=month, day=1)


def _quarter_end(value: date) -> date:
    return _month_end(_add_months(_quarter_start(value), 2))


def _add_months(value: date, months: int) -> date:
    year = value.year + (value.month - 1 + months) // 12
    month = (value.month - 1 + months) % 12 + 1
    day = min(value.day, _month_end(date(year, month, 1)).day)
    return date(year, month, day)


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def quarter_key(value: date) -> str:
    return f"{value.year:04d}-Q{_quarter_number(value)}"


def month_label(value: date) -> str:
    return value.strftime("%b %Y")


def quarter_label(value: date) -> str:
    return f"Q{_quarter_number(value)} {value.year}"


def partition(start: date | datetime, end: date | datetime, granularity: Granularity | str) -> list[Period]:
    """Split ``[start, end]`` into ordered, gap-free, non-overlapping periods.

    Month and quarter periods begin at the calendar boundary containing
    ``start``; their filter bounds are clamped to the requested range while
    labels keep the full calendar span. ``start > end`` yields ``[]``.
    """
    start = as_calendar_date(start)
    end = as_calendar_date(end)
    try:
        granularity = Granularity(granularity)
    except ValueError as exc:
        logger.error(
            "Unsupported granularity requested",
            error_id=ErrorIds.UNSUPPORTED_GRANULARITY,
            granularity=str(granularity),
        )
        raise ReportError(f"Unsupported granularity: {granularity}") from exc

    if start > end:
        return []

    if granularity is Granularity.TOTAL:
        return [Period(start=start, end=end, key="total", label="Total", label_start=start, label_end=end)]

    if granularity is Granularity.MONTH:
        span_start, span_end, step = _month_start, _month_end, 1
        make_key, make_label = month_key, month_label
    else:
        span_start, span_end, step = _quarter_start, _quarter_end, 3
        make_key, make_label = quarter_key, quarter_label

    periods: list[Period] = []
    cursor = span_start(start)
    while cursor <= end:
        full_end = span_end(cursor)
        periods.append(
            Period(
                start=max(cursor, start),
                end=min(full_end, end),
                key=make_key(cursor),
                label=make_label(cursor),
                label_start=cursor,
                label_end=full_end,
            )
        )
        cursor = _add_months(cursor, step)
    return periods


def months_in_range(start: date, end: date) -> list[str]:
    """``YYYY-MM`` keys of every month touched by the range."""
    return [period.key for period in partition(start, end, Granularity.MONTH)]


def quarters_in_range(start: date, end: date) -> list[str]:
    """``YYYY-Qn`` keys of every quarter touched by the range."""
    return [period.key for period in partition(start, end, Granularity.QUARTER)]


def period_for_key(key: str) -> Period:
    """Full calendar period for a ``YYYY-MM`` or ``YYYY-Qn`` key."""
    if match := _MONTH_KEY.match(key):
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ReportError(f"Invalid month key: {key}")
        first = date(year, month, 1)
        last = _month_end(first)
        return Period(start=first, end=last, key=key, label=month_label(first), label_start=first, label_end=last)
    if match := _QUARTER_KEY.match(key):
        year, quarter = int(match.group(1)), int(match.group(2))
        first = date(year, (quarter - 1) * 3 + 1, 1)
        last = _quarter_end(first)
        return Period(start=first, end=last, key=key, label=quarter_label(first), label_start=first, label_end=last)
    raise ReportError(f"Unsupported period key: {key}")


def resolve_preset(preset: DateRangePreset | str, today: date | None = None) -> DateRange:
    """Translate a named preset into concrete dates relative to ``today``."""
    try:
        preset = DateRangePreset(preset)
    except ValueError as exc:
        logger.error(
            "Unsupported date range preset requested",
            error_id=ErrorIds.UNSUPPORTED_PRESET,
            preset=str(preset),
        )
        raise ReportError(f"Unsupported preset: {preset}") from exc

    today = as_calendar_date(today or date.today())
    this_month = _month_start(today)

    if preset is DateRangePreset.THIS_MONTH:
        return DateRange(start=this_month, end=_month_end(today))
    if preset is DateRangePreset.LAST_MONTH:
        last_month = _add_months(this_month, -1)
        return DateRange(start=last_month, end=_month_end(last_month))
    if preset is DateRangePreset.LAST_4_MONTHS:
        return DateRange(start=_add_months(this_month, -4), end=this_month - timedelta(days=1))
    if preset is DateRangePreset.LAST_12_MONTHS:
        return DateRange(start=_add_months(this_month, -12), end=_month_end(today))
    if preset is DateRangePreset.THIS_QUARTER:
        return DateRange(start=_quarter_start(today), end=_quarter_end(today))
    if preset is DateRangePreset.LAST_QUARTER:
        last_quarter = _add_months(_quarter_start(today), -3)
        return DateRange(start=last_quarter, end=_quarter_end(last_quarter))
    if preset is DateRangePreset.THIS_YEAR:
        return DateRange(start=date(today.year, 1, 1), end=date(today.year, 12, 31))
    if preset is DateRangePreset.LAST_YEAR:
        return DateRange(start=date(today.year - 1, 1, 1), end=date(today.year - 1, 12, 31))
    if preset is DateRangePreset.THIS_YEAR_TO_LAST_MONTH:
        # In January this range is empty (end before start).
        return DateRange(start=date(today.year, 1, 1), end=this_month - timedelta(days=1))
    return DateRange(start=date(today.year, 1, 1), end=today)


def _is_whole_months(start: date, end: date) -> bool:
    return start.day == 1 and end == _month_end(end)


def previous_period(start: date, end: date) -> DateRange:
    """The range of equal length that ends the day before ``start``.

    Whole-month ranges shift by the same number of calendar months so that
    e.g. Q2 compares against Q1 rather than against an 91-day window.
    """
    start = as_calendar_date(start)
    end = as_calendar_date(end)
    if start > end:
        return DateRange(start=start, end=end)
    previous_end = start - timedelta(days=1)
    if _is_whole_months(start, end):
        months = (end.year - start.year) * 12 + end.month - start.month + 1
        return DateRange(start=_add_months(start, -months), end=previous_end)
    return DateRange(start=previous_end - (end - start), end=previous_end)
