"""
Record aggregator - loads attendance for the subjects of an export

Responsibilities:
1. Load per-subject records scoped to the resolved range
   - csc: daily timetable rows of the monthly timesheet
   - default: scanner logs within the range
   - preformatted: scanner logs within the range plus the neighbouring
     days (overnight shifts)
2. Apply the row-level filters (regular days / overtime work)
3. Mark each timesheet with the view that was applied
4. Group by office code when a grouped transmittal is requested

Output order follows the subjects' order; grouping keeps each office
group contiguous, groups in order of first appearance.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from ..interfaces import IAttendanceStore
from ..models import ExportRequest, Layout, PeriodKind, Timesheet, Timetable
from .range_resolver import DateRange, DateSet, RangeResolver, Resolved

logger = logging.getLogger(__name__)


def is_regular_day(row: Timetable) -> bool:
    return row.regular


def is_overtime_work(row: Timetable) -> bool:
    """Attendance on a non-regular day, or overtime on a regular day"""
    return (row.present and not row.regular) or (row.overtime > 0 and row.regular)


class RecordAggregator:
    """Builds the ordered timesheet views of an export"""

    def __init__(self, store: IAttendanceStore, resolver: RangeResolver | None = None):
        self.store = store
        self.resolver = resolver or RangeResolver()

    def aggregate(self, request: ExportRequest) -> list[Timesheet]:
        resolved = self.resolver.resolve(request.month, request.period)

        if request.layout is Layout.CSC:
            sheets = self._timesheets(request, resolved)
        else:
            sheets = self._time_logs(request, resolved)

        if request.groups_by_office:
            sheets = group_by_office(sheets)

        logger.info(
            f"Aggregated {len(sheets)}/{request.subject_count} timesheets "
            f"({request.layout.value}, {request.period.token()})"
        )
        return sheets

    def _timesheets(self, request: ExportRequest, resolved: Resolved) -> list[Timesheet]:
        sheets = []
        for employee in request.subjects:
            sheet = self.store.timesheet(employee, request.month)
            if sheet is None:
                # no attendance data for the month: left out of the CSC form
                continue
            rows = [row for row in sheet.timetables if row.date in resolved]
            if request.period.kind is PeriodKind.REGULAR_DAYS:
                rows = [row for row in rows if is_regular_day(row)]
            elif request.period.kind is PeriodKind.OVERTIME_WORK:
                rows = [row for row in rows if is_overtime_work(row)]
            sheets.append(
                sheet.model_copy(update={"timetables": rows, "view": request.period})
            )
        return sheets

    def _time_logs(self, request: ExportRequest, resolved: Resolved) -> list[Timesheet]:
        start, end = _span(resolved)
        if start is None:
            return [
                Timesheet(employee=employee, month=request.month, view=request.period)
                for employee in request.subjects
            ]

        neighbours = request.layout is Layout.PREFORMATTED
        if neighbours:
            start -= timedelta(days=1)
            end += timedelta(days=1)

        sheets = []
        for employee in request.subjects:
            logs = self.store.time_logs(employee, start, end)
            if isinstance(resolved, DateSet):
                keep = set(resolved.dates)
                if neighbours:
                    keep |= {resolved.first - timedelta(days=1), resolved.last + timedelta(days=1)}
                logs = [log for log in logs if log.day in keep]
            logs = sorted(logs, key=lambda log: log.time)
            sheets.append(
                Timesheet(employee=employee, month=request.month, logs=logs, view=request.period)
            )
        return sheets


def group_by_office(sheets: list[Timesheet]) -> list[Timesheet]:
    """Stable partition by office codes, flattened back into one sequence"""
    groups: dict[tuple[str, ...], list[Timesheet]] = {}
    for sheet in sheets:
        groups.setdefault(tuple(sheet.employee.offices), []).append(sheet)
    return [sheet for group in groups.values() for sheet in group]


def _span(resolved: Resolved) -> tuple[date | None, date | None]:
    if isinstance(resolved, DateRange):
        return resolved.start, resolved.end
    return resolved.first, resolved.last
