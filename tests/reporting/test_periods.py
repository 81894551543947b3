"""Tests for period partitioning and date-range presets."""

from datetime import date, datetime

import pytest

from bookkeeping.models import DateRange, Granularity
from bookkeeping.services.periods import (
    DateRangePreset,
    months_in_range,
    partition,
    period_for_key,
    previous_period,
    quarters_in_range,
    resolve_preset,
)
from bookkeeping.utils.exceptions import ReportError


def test_month_partition_clamps_filters_but_labels_full_months() -> None:
    periods = partition(date(2024, 1, 10), date(2024, 3, 5), Granularity.MONTH)

    assert [p.key for p in periods] == ["2024-01", "2024-02", "2024-03"]
    assert [p.label for p in periods] == ["Jan 2024", "Feb 2024", "Mar 2024"]
    assert periods[0].start == date(2024, 1, 10)
    assert periods[0].label_start == date(2024, 1, 1)
    assert periods[1].start == date(2024, 2, 1)
    assert periods[1].end == date(2024, 2, 29)
    assert periods[-1].end == date(2024, 3, 5)
    assert periods[-1].label_end == date(2024, 3, 31)


def test_quarter_partition() -> None:
    periods = partition(date(2024, 2, 1), date(2024, 8, 15), "quarter")

    assert [p.key for p in periods] == ["2024-Q1", "2024-Q2", "2024-Q3"]
    assert [p.label for p in periods] == ["Q1 2024", "Q2 2024", "Q3 2024"]
    assert periods[0].start == date(2024, 2, 1)
    assert periods[0].label_start == date(2024, 1, 1)
    assert periods[1].start == date(2024, 4, 1)
    assert periods[1].end == date(2024, 6, 30)
    assert periods[2].end == date(2024, 8, 15)
    assert periods[2].label_end == date(2024, 9, 30)


def test_total_is_single_period() -> None:
    periods = partition(date(2024, 1, 10), date(2024, 3, 5), Granularity.TOTAL)
    assert len(periods) == 1
    assert periods[0].key == "total"
    assert periods[0].label == "Total"
    assert (periods[0].start, periods[0].end) == (date(2024, 1, 10), date(2024, 3, 5))


def test_partition_is_gap_free_across_year_end() -> None:
    periods = partition(date(2023, 11, 15), date(2024, 2, 10), Granularity.MONTH)
    assert [p.key for p in periods] == ["2023-11", "2023-12", "2024-01", "2024-02"]
    for left, right in zip(periods, periods[1:]):
        assert (right.start - left.end).days == 1


def test_inverted_range_is_empty() -> None:
    assert partition(date(2024, 3, 1), date(2024, 2, 1), Granularity.MONTH) == []


def test_datetimes_partition_by_calendar_date() -> None:
    late = partition(datetime(2024, 1, 31, 23, 59), datetime(2024, 2, 1, 0, 1), Granularity.MONTH)
    assert [p.key for p in late] == ["2024-01", "2024-02"]


def test_unsupported_granularity() -> None:
    with pytest.raises(ReportError, match="Unsupported granularity: weekly"):
        partition(date(2024, 1, 1), date(2024, 2, 1), "weekly")


def test_key_helpers() -> None:
    assert months_in_range(date(2024, 11, 3), date(2025, 1, 2)) == ["2024-11", "2024-12", "2025-01"]
    assert quarters_in_range(date(2024, 11, 3), date(2025, 4, 2)) == ["2024-Q4", "2025-Q1", "2025-Q2"]


def test_period_for_key() -> None:
    february = period_for_key("2024-02")
    assert (february.start, february.end) == (date(2024, 2, 1), date(2024, 2, 29))
    q4 = period_for_key("2023-Q4")
    assert (q4.start, q4.end, q4.label) == (date(2023, 10, 1), date(2023, 12, 31), "Q4 2023")
    with pytest.raises(ReportError):
        period_for_key("2024-13")
    with pytest.raises(ReportError):
        period_for_key("2024/01")


@pytest.mark.parametrize(
    ("preset", "expected"),
    [
        (DateRangePreset.THIS_MONTH, (date(2024, 5, 1), date(2024, 5, 31))),
        (DateRangePreset.LAST_MONTH, (date(2024, 4, 1), date(2024, 4, 30))),
        (DateRangePreset.LAST_4_MONTHS, (date(2024, 1, 1), date(2024, 4, 30))),
        (DateRangePreset.LAST_12_MONTHS, (date(2023, 5, 1), date(2024, 5, 31))),
        (DateRangePreset.THIS_QUARTER, (date(2024, 4, 1), date(2024, 6, 30))),
        (DateRangePreset.LAST_QUARTER, (date(2024, 1, 1), date(2024, 3, 31))),
        (DateRangePreset.THIS_YEAR, (date(2024, 1, 1), date(2024, 12, 31))),
        (DateRangePreset.LAST_YEAR, (date(2023, 1, 1), date(2023, 12, 31))),
        (DateRangePreset.THIS_YEAR_TO_LAST_MONTH, (date(2024, 1, 1), date(2024, 4, 30))),
        (DateRangePreset.THIS_YEAR_TO_TODAY, (date(2024, 1, 1), date(2024, 5, 15))),
    ],
)
def test_resolve_preset(preset: DateRangePreset, expected: tuple[date, date]) -> None:
    resolved = resolve_preset(preset, today=date(2024, 5, 15))
    assert (resolved.start, resolved.end) == expected


def test_last_quarter_in_january_wraps_year() -> None:
    resolved = resolve_preset("last_quarter", today=date(2024, 1, 9))
    assert resolved == DateRange(start=date(2023, 10, 1), end=date(2023, 12, 31))


def test_year_to_last_month_in_january_is_empty() -> None:
    resolved = resolve_preset("this_year_to_last_month", today=date(2024, 1, 9))
    assert resolved.is_empty
    assert partition(resolved.start, resolved.end, Granularity.MONTH) == []


def test_unknown_preset() -> None:
    with pytest.raises(ReportError, match="Unsupported preset"):
        resolve_preset("next_decade", today=date(2024, 1, 1))


class TestPreviousPeriod:
    def test_quarter_compares_to_previous_quarter(self) -> None:
        previous = previous_period(date(2024, 4, 1), date(2024, 6, 30))
        assert previous == DateRange(start=date(2024, 1, 1), end=date(2024, 3, 31))

    def test_month_compares_to_previous_month(self) -> None:
        previous = previous_period(date(2024, 3, 1), date(2024, 3, 31))
        assert previous == DateRange(start=date(2024, 2, 1), end=date(2024, 2, 29))

    def test_partial_range_shifts_by_days(self) -> None:
        previous = previous_period(date(2024, 3, 11), date(2024, 3, 20))
        assert previous == DateRange(start=date(2024, 3, 1), end=date(2024, 3, 10))
