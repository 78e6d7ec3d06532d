"""
Period selector - which part of the month an export covers

String form (as submitted by export forms and the CLI):
    full | 1st | 2nd | regular | overtime | dates | range|<from>-<to>

Custom dates are cleaned on the way in: entries that are not well-formed
``YYYY-MM-DD`` calendar dates are dropped without error.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel

from ..interfaces import InvalidConfiguration

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class PeriodKind(str, Enum):
    """Period tags"""
    FULL = "full"
    FIRST_HALF = "1st"
    SECOND_HALF = "2nd"
    REGULAR_DAYS = "regular"
    OVERTIME_WORK = "overtime"
    CUSTOM_DATES = "dates"
    CUSTOM_RANGE = "range"


# Row-level filters; these cover the whole month date-wise
ROW_FILTERS = frozenset({PeriodKind.REGULAR_DAYS, PeriodKind.OVERTIME_WORK})


class PeriodSelector(BaseModel):
    """Tagged period: kind plus custom dates or custom day bounds"""
    kind: PeriodKind = PeriodKind.FULL
    dates: tuple[date, ...] = ()
    day_start: int | None = None
    day_end: int | None = None
    # literal "<from>-<to>" text of a parsed custom range, used in filenames
    bounds: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def full(cls) -> PeriodSelector:
        return cls(kind=PeriodKind.FULL)

    @classmethod
    def custom_dates(cls, values: Iterable[str | date]) -> PeriodSelector:
        return cls(kind=PeriodKind.CUSTOM_DATES, dates=clean_dates(values))

    @classmethod
    def custom_range(cls, day_start: int, day_end: int, bounds: str | None = None) -> PeriodSelector:
        return cls(kind=PeriodKind.CUSTOM_RANGE, day_start=day_start, day_end=day_end, bounds=bounds)

    @classmethod
    def parse(cls, value: str | PeriodKind | PeriodSelector, dates: Iterable[str | date] = ()) -> PeriodSelector:
        """
        Parse the string form

        Raises:
            InvalidConfiguration: unknown tag or malformed custom range
        """
        if isinstance(value, PeriodSelector):
            return value
        if isinstance(value, PeriodKind):
            value = value.value

        tag, _, bounds = str(value).partition("|")
        try:
            kind = PeriodKind(tag)
        except ValueError:
            raise InvalidConfiguration(f"Unknown period: {value}") from None

        if kind is PeriodKind.CUSTOM_RANGE:
            day_start, day_end = _parse_bounds(bounds, value)
            return cls.custom_range(day_start, day_end, bounds=bounds.strip())

        if kind is PeriodKind.CUSTOM_DATES:
            return cls.custom_dates(dates)

        return cls(kind=kind)

    @property
    def is_row_filter(self) -> bool:
        return self.kind in ROW_FILTERS

    def token(self) -> str:
        """Inverse of ``parse`` (custom dates travel separately)"""
        if self.kind is PeriodKind.CUSTOM_RANGE:
            return f"range|{self.day_start:02d}-{self.day_end:02d}"
        return self.kind.value


def clean_dates(values: Iterable[str | date]) -> tuple[date, ...]:
    """Keep well-formed calendar dates, silently dropping the rest"""
    cleaned = []
    for value in values:
        if isinstance(value, datetime):
            value = value.date()
        if isinstance(value, date):
            cleaned.append(value)
            continue
        if not isinstance(value, str) or not _ISO_DATE.match(value):
            continue
        try:
            cleaned.append(date.fromisoformat(value))
        except ValueError:
            continue
    return tuple(cleaned)


def _parse_bounds(bounds: str, value: str) -> tuple[int, int]:
    parts = [part for part in bounds.split("-", 1) if part.strip()]
    if len(parts) != 2:
        raise InvalidConfiguration(f"Custom range needs two bounds: {value}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise InvalidConfiguration(f"Malformed custom range: {value}") from None
