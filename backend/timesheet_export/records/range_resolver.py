"""
Range resolver - (month, period) to a date interval or a date set

Rules:
- full: day 1 to the last day of the month
- 1st: days 1-15; 2nd: day 16 to the end of the month
- range|a-b: literal days a-b of the month (the calendar rejects day 32)
- dates: the cleaned date set, passed through unchanged
- regular / overtime: whole month; the row filter is applied downstream

Test points:
- test_full_month / test_halves: interval bounds
- test_custom_range_out_of_calendar: invalid day rejected
- test_row_filters_cover_month: regular/overtime resolve to the month
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Union

from ..interfaces import InvalidConfiguration
from ..models import PeriodKind, PeriodSelector


@dataclass(frozen=True)
class DateRange:
    """Inclusive day interval"""
    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)

    @property
    def first(self) -> date:
        return self.start

    @property
    def last(self) -> date:
        return self.end


@dataclass(frozen=True)
class DateSet:
    """Discrete set of days (custom dates)"""
    dates: tuple[date, ...]

    def __contains__(self, day: date) -> bool:
        return day in self.dates

    def days(self) -> Iterator[date]:
        yield from sorted(set(self.dates))

    @property
    def first(self) -> date | None:
        return min(self.dates) if self.dates else None

    @property
    def last(self) -> date | None:
        return max(self.dates) if self.dates else None


Resolved = Union[DateRange, DateSet]


class RangeResolver:
    """Turns a month anchor and a period selector into concrete days"""

    def resolve(self, month: date, period: PeriodSelector) -> Resolved:
        month = month.replace(day=1)
        last_day = calendar.monthrange(month.year, month.month)[1]
        kind = period.kind

        if kind in (PeriodKind.FULL, PeriodKind.REGULAR_DAYS, PeriodKind.OVERTIME_WORK):
            return DateRange(month, month.replace(day=last_day))

        if kind is PeriodKind.FIRST_HALF:
            return DateRange(month, month.replace(day=15))

        if kind is PeriodKind.SECOND_HALF:
            return DateRange(month.replace(day=16), month.replace(day=last_day))

        if kind is PeriodKind.CUSTOM_RANGE:
            return self._custom_range(month, period)

        if kind is PeriodKind.CUSTOM_DATES:
            return DateSet(period.dates)

        raise AssertionError(f"Unhandled period kind: {kind!r}")

    def bounds(self, month: date, period: PeriodSelector) -> tuple[int, int] | None:
        """First and last day numbers, None for custom dates"""
        resolved = self.resolve(month, period)
        if isinstance(resolved, DateSet):
            return None
        return resolved.start.day, resolved.end.day

    @staticmethod
    def _custom_range(month: date, period: PeriodSelector) -> DateRange:
        if period.day_start is None or period.day_end is None:
            raise InvalidConfiguration("Custom range needs two bounds")
        try:
            start = month.replace(day=period.day_start)
            end = month.replace(day=period.day_end)
        except ValueError as e:
            raise InvalidConfiguration(f"Custom range outside the calendar: {e}") from e
        if start > end:
            raise InvalidConfiguration(
                f"Custom range starts after it ends: {period.day_start}-{period.day_end}"
            )
        return DateRange(start, end)
