"""
Output filenames

    Timesheets <YYYY-MM> <period label> (<subject name(s)>)

Examples:
    Timesheets 2024-01 (First half) (Jane Doe)
    Timesheets 2024-01 (Doe,Roe,Smith)
    Timesheets 2024-01 (1-3,5) (Jane Doe)
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from ..config import LayoutSpec, load_layouts
from ..models import Employee, PeriodKind, PeriodSelector

NAME_LIMIT = 60


def compress_numbers(numbers: Iterable[int]) -> str:
    """[1, 2, 3, 5, 7, 8] -> '1-3,5,7-8'"""
    values = sorted(set(numbers))
    if not values:
        return ""

    parts = []
    start = prev = values[0]
    for value in values[1:]:
        if value == prev + 1:
            prev = value
            continue
        parts.append(_span(start, prev))
        start = prev = value
    parts.append(_span(start, prev))
    return ",".join(parts)


def _span(start: int, end: int) -> str:
    return str(start) if start == end else f"{start}-{end}"


def period_label(period: PeriodSelector, layouts: LayoutSpec | None = None) -> str:
    if period.kind is PeriodKind.CUSTOM_DATES:
        return f"({compress_numbers(day.day for day in period.dates)})"
    if period.kind is PeriodKind.CUSTOM_RANGE:
        return f"({period.bounds or f'{period.day_start}-{period.day_end}'})"
    layouts = layouts or load_layouts()
    return layouts.label_for(period.kind.value) or ""


def subjects_label(subjects: tuple[Employee, ...], single_subject: bool) -> str:
    if single_subject and len(subjects) == 1:
        return subjects[0].name
    return ",".join(sorted(employee.surname for employee in subjects))[:NAME_LIMIT]


def build_filename(
    month: date,
    period: PeriodSelector,
    subjects: tuple[Employee, ...],
    single_subject: bool = True,
    layouts: LayoutSpec | None = None,
) -> str:
    """Deterministic output filename without extension"""
    parts = ["Timesheets", month.strftime("%Y-%m")]
    label = period_label(period, layouts)
    if label:
        parts.append(label)
    parts.append(f"({subjects_label(subjects, single_subject)})")
    return " ".join(parts)
