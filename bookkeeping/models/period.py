"""Date span value types used to slice the ledger."""

from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass


class Granularity(str, enum.Enum):
    """Supported column bucketing for statements."""

    MONTH = "month"
    QUARTER = "quarter"
    TOTAL = "total"


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar span. ``None`` leaves that side unbounded."""

    start: dt.date | None
    end: dt.date | None

    def contains(self, value: dt.date) -> bool:
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True

    @property
    def is_empty(self) -> bool:
        return self.start is not None and self.end is not None and self.start > self.end


@dataclass(frozen=True)
class Period(DateRange):
    """One column of a PeriodSet.

    ``start``/``end`` are the filter bounds, clamped to the requested range.
    ``label_start``/``label_end`` cover the full calendar month or quarter.
    """

    key: str
    label: str
    label_start: dt.date
    label_end: dt.date
