"""
In-memory attendance store - backs the CLI and the unit tests

Dataset layout (YAML or JSON):

    employees:
      - {id: "1", name: "Jane Doe", last_name: Doe, offices: [HR]}
    timesheets:
      - employee_id: "1"
        month: 2024-01-01
        timetables:
          - {date: 2024-01-02, present: true, regular: true, overtime: 0}
    time_logs:
      - {employee_id: "1", time: "2024-01-02T07:58:00", state: in, scanner: lobby}
"""

from __future__ import annotations

from datetime import date
from typing import Any

from ..interfaces import IAttendanceStore
from ..models import Employee, TimeLog, Timesheet, Timetable


class InMemoryAttendanceStore(IAttendanceStore):
    """Attendance store over plain dictionaries"""

    def __init__(
        self,
        timesheets: list[Timesheet] | None = None,
        time_logs: dict[str, list[TimeLog]] | None = None,
    ):
        self._timesheets: dict[tuple[str, date], Timesheet] = {}
        for sheet in timesheets or []:
            self.add_timesheet(sheet)
        self._time_logs: dict[str, list[TimeLog]] = {
            key: list(logs) for key, logs in (time_logs or {}).items()
        }

    def add_timesheet(self, sheet: Timesheet) -> None:
        self._timesheets[(sheet.employee.id, sheet.month.replace(day=1))] = sheet

    def add_time_log(self, employee_id: str, log: TimeLog) -> None:
        self._time_logs.setdefault(employee_id, []).append(log)

    def timesheet(self, employee: Employee, month: date) -> Timesheet | None:
        return self._timesheets.get((employee.id, month.replace(day=1)))

    def time_logs(self, employee: Employee, start: date, end: date) -> list[TimeLog]:
        logs = self._time_logs.get(employee.id, [])
        return sorted(
            (log for log in logs if start <= log.day <= end),
            key=lambda log: log.time,
        )

    @classmethod
    def from_dataset(cls, data: dict[str, Any]) -> tuple[InMemoryAttendanceStore, list[Employee]]:
        """Build a store plus the employee list from a parsed dataset"""
        employees = [Employee(**item) for item in data.get("employees", [])]
        by_id = {employee.id: employee for employee in employees}

        store = cls()
        for item in data.get("timesheets", []):
            employee = by_id[str(item["employee_id"])]
            store.add_timesheet(
                Timesheet(
                    employee=employee,
                    month=item["month"],
                    timetables=[Timetable(**row) for row in item.get("timetables", [])],
                )
            )
        for item in data.get("time_logs", []):
            fields = dict(item)
            employee_id = str(fields.pop("employee_id"))
            store.add_time_log(employee_id, TimeLog(**fields))

        return store, employees
