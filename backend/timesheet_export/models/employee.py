"""
Attendance models - employees, scanner logs, daily timetables, timesheets

Persistence is owned by the attendance store; these are plain values.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .period import PeriodSelector


class Employee(BaseModel):
    """Subject of an export"""
    id: str
    name: str = Field(..., description="Display name, e.g. 'Jane Doe'")
    last_name: str | None = None
    offices: list[str] = Field(default_factory=list, description="Office codes")
    regular: bool = True
    active: bool = True

    @property
    def surname(self) -> str:
        if self.last_name:
            return self.last_name
        return self.name.split()[-1] if self.name.split() else self.name


class Signer(BaseModel):
    """User performing the export (and signing it)"""
    id: str
    name: str
    email: str | None = None
    title: str | None = None


class LogState(str, Enum):
    """Scanner punch direction"""
    IN = "in"
    OUT = "out"
    UNKNOWN = "unknown"


class TimeLog(BaseModel):
    """One scanner punch"""
    time: datetime
    state: LogState = LogState.UNKNOWN
    scanner: str | None = None

    @property
    def day(self) -> date:
        return self.time.date()


class Timetable(BaseModel):
    """Daily attendance row of a timesheet"""
    date: date
    punch: dict[str, Any] = Field(default_factory=dict)
    undertime: int = 0
    overtime: int = 0
    duration: int = 0
    half: bool = False
    absent: bool = False
    present: bool = False
    invalid: bool = False
    holiday: str | None = None
    regular: bool = True


class Timesheet(BaseModel):
    """
    Per-employee attendance for one month

    ``view`` records the sub-selection applied (first half, custom dates,
    regular days, ...) so the document can be labelled accordingly.
    ``timetables`` holds daily rows (CSC layout), ``logs`` raw scanner
    punches (default and preformatted layouts).
    """
    employee: Employee
    month: date
    timetables: list[Timetable] = Field(default_factory=list)
    logs: list[TimeLog] = Field(default_factory=list)
    view: PeriodSelector = Field(default_factory=PeriodSelector.full)

    def logs_for_day(self, day: date) -> list[TimeLog]:
        return sorted((log for log in self.logs if log.day == day), key=lambda log: log.time)

    def timetable_for_day(self, day: date) -> Timetable | None:
        for row in self.timetables:
            if row.date == day:
                return row
        return None
