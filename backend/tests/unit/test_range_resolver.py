"""
Range resolver unit tests

Run after changing a module: pytest backend/tests/unit/test_range_resolver.py -v
"""

from datetime import date

import pytest

from timesheet_export.interfaces import InvalidConfiguration
from timesheet_export.models import PeriodSelector
from timesheet_export.records import DateRange, DateSet, RangeResolver

FEB_2024 = date(2024, 2, 1)


@pytest.fixture
def resolver() -> RangeResolver:
    return RangeResolver()


class TestRangeResolver:
    """Period to day range tests"""

    def test_full_month(self, resolver):
        """Test full month in a leap year"""
        resolved = resolver.resolve(FEB_2024, PeriodSelector.full())
        assert resolved == DateRange(date(2024, 2, 1), date(2024, 2, 29))
        assert len(list(resolved.days())) == 29

    def test_halves(self, resolver):
        """Test first and second half"""
        first = resolver.resolve(FEB_2024, PeriodSelector.parse("1st"))
        second = resolver.resolve(FEB_2024, PeriodSelector.parse("2nd"))
        assert first == DateRange(date(2024, 2, 1), date(2024, 2, 15))
        assert second == DateRange(date(2024, 2, 16), date(2024, 2, 29))

    def test_month_anchor_any_day(self, resolver):
        """Test the month anchor need not be the first"""
        resolved = resolver.resolve(date(2024, 4, 20), PeriodSelector.full())
        assert resolved == DateRange(date(2024, 4, 1), date(2024, 4, 30))

    def test_row_filters_cover_month(self, resolver):
        """Test regular/overtime resolve to the whole month"""
        for token in ("regular", "overtime"):
            resolved = resolver.resolve(FEB_2024, PeriodSelector.parse(token))
            assert resolved == DateRange(date(2024, 2, 1), date(2024, 2, 29))

    def test_custom_range(self, resolver):
        """Test literal day bounds"""
        resolved = resolver.resolve(FEB_2024, PeriodSelector.parse("range|05-10"))
        assert resolved == DateRange(date(2024, 2, 5), date(2024, 2, 10))
        assert date(2024, 2, 10) in resolved
        assert date(2024, 2, 11) not in resolved

    def test_custom_range_out_of_calendar(self, resolver):
        """Test a day the month does not have"""
        with pytest.raises(InvalidConfiguration):
            resolver.resolve(FEB_2024, PeriodSelector.parse("range|01-30"))

    def test_custom_range_reversed(self, resolver):
        """Test a range that starts after it ends"""
        with pytest.raises(InvalidConfiguration):
            resolver.resolve(FEB_2024, PeriodSelector.custom_range(10, 5))

    def test_custom_dates(self, resolver):
        """Test custom dates pass through as a set"""
        period = PeriodSelector.custom_dates(["2024-02-09", "2024-02-03"])
        resolved = resolver.resolve(FEB_2024, period)
        assert isinstance(resolved, DateSet)
        assert list(resolved.days()) == [date(2024, 2, 3), date(2024, 2, 9)]
        assert resolved.first == date(2024, 2, 3)
        assert resolved.last == date(2024, 2, 9)

    def test_empty_custom_dates(self, resolver):
        """Test every date dropped leaves an empty set"""
        resolved = resolver.resolve(FEB_2024, PeriodSelector.custom_dates(["bogus"]))
        assert list(resolved.days()) == []
        assert resolved.first is None

    def test_bounds(self, resolver):
        """Test day-number bounds"""
        assert resolver.bounds(FEB_2024, PeriodSelector.parse("2nd")) == (16, 29)
        assert resolver.bounds(FEB_2024, PeriodSelector.custom_dates(["2024-02-03"])) is None
