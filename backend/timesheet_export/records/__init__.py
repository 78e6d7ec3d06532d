"""
Attendance records - range resolution and aggregation

Sub-modules:
- range_resolver: (month, period) to a date interval or date set
- aggregator: per-subject timesheet views with row filters and grouping
- memory: in-memory attendance store
"""

from .aggregator import RecordAggregator, group_by_office, is_overtime_work, is_regular_day
from .memory import InMemoryAttendanceStore
from .range_resolver import DateRange, DateSet, RangeResolver

__all__ = [
    "RangeResolver",
    "DateRange",
    "DateSet",
    "RecordAggregator",
    "group_by_office",
    "is_regular_day",
    "is_overtime_work",
    "InMemoryAttendanceStore",
]
