"""
Export request - immutable configuration of one timesheet export

``ExportRequestBuilder`` offers chained setters, each validating its own
field; ``build()`` validates the combination and returns a frozen
``ExportRequest``. The orchestrator only ever sees the frozen value.

Usage:
    request = (
        ExportRequestBuilder()
        .employee(employees)
        .month("2024-01")
        .period("1st")
        .layout("csc")
        .paper_size("folio")
        .build()
    )
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..interfaces import InvalidConfiguration
from .employee import Employee, Signer
from .period import PeriodKind, PeriodSelector, ROW_FILTERS


class Layout(str, Enum):
    """Document layouts"""
    DEFAULT = "default"
    CSC = "csc"
    PREFORMATTED = "preformatted"


class PaperSize(str, Enum):
    """Paper sizes; folio (8.5in x 13in) has no named format"""
    A4 = "a4"
    LETTER = "letter"
    FOLIO = "folio"
    LEGAL = "legal"


class Grouping(str, Enum):
    """Transmittal grouping"""
    NONE = "none"
    BY_OFFICE = "offices"


class SignatureMode(str, Enum):
    """Signature on the exported document"""
    NONE = "none"
    ELECTRONIC = "electronic"   # specimen image only
    DIGITAL = "digital"         # specimen image plus cryptographic signature

    @property
    def electronic(self) -> bool:
        return self in (SignatureMode.ELECTRONIC, SignatureMode.DIGITAL)

    @property
    def digital(self) -> bool:
        return self is SignatureMode.DIGITAL


def check_compatibility(layout: Layout, period: PeriodSelector) -> None:
    """Default layout has no regular-days or overtime-work rendition"""
    if layout is Layout.DEFAULT and period.kind in ROW_FILTERS:
        raise InvalidConfiguration(
            "Default format is not supported for regular and overtime period"
        )


class ExportRequest(BaseModel):
    """Frozen export configuration"""
    subjects: tuple[Employee, ...]
    # True when a single employee (not a collection) was selected
    single_subject: bool = False
    month: date
    period: PeriodSelector = Field(default_factory=PeriodSelector.full)
    layout: Layout = Layout.CSC
    paper_size: PaperSize = PaperSize.FOLIO
    transmittal_copies: int = Field(0, ge=0)
    grouping: Grouping = Grouping.BY_OFFICE
    signature_mode: SignatureMode = SignatureMode.NONE
    individual_archive: bool = False
    misc: dict[str, Any] = Field(default_factory=dict)
    signer: Signer | None = None
    # single-sheet rendition flag passed through to templates
    single: bool = False

    model_config = {"frozen": True}

    @property
    def subject_count(self) -> int:
        return len(self.subjects)

    @property
    def groups_by_office(self) -> bool:
        return self.transmittal_copies > 0 and self.grouping is Grouping.BY_OFFICE

    def fingerprint(self) -> str:
        """SHA-256 of the canonical arguments (cache key)"""
        payload = self.model_dump(mode="json")
        encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class ExportRequestBuilder:
    """Chained, per-field validated construction of ``ExportRequest``"""

    def __init__(self) -> None:
        self._subjects: tuple[Employee, ...] = ()
        self._single_subject = False
        self._month: date | None = None
        self._period = PeriodSelector.full()
        self._dates: tuple[str | date, ...] = ()
        self._layout = Layout.CSC
        self._paper_size = PaperSize.FOLIO
        self._transmittal = 0
        self._grouping = Grouping.BY_OFFICE
        self._signature = SignatureMode.NONE
        self._individual = False
        self._misc: dict[str, Any] = {}
        self._signer: Signer | None = None
        self._single = False

    def employee(self, employee: Employee | Iterable[Employee]) -> ExportRequestBuilder:
        if isinstance(employee, Employee):
            self._subjects = (employee,)
            self._single_subject = True
            return self

        subjects = tuple(employee)
        if not all(isinstance(item, Employee) for item in subjects):
            raise InvalidConfiguration("Subjects must be employees")
        self._subjects = subjects
        self._single_subject = False
        return self

    def month(self, month: date | str) -> ExportRequestBuilder:
        self._month = parse_month(month)
        return self

    def period(self, period: str | PeriodKind | PeriodSelector) -> ExportRequestBuilder:
        self._period = PeriodSelector.parse(period, self._dates)
        return self

    def dates(self, dates: Iterable[str | date]) -> ExportRequestBuilder:
        self._dates = tuple(dates)
        if self._period.kind is PeriodKind.CUSTOM_DATES:
            self._period = PeriodSelector.custom_dates(self._dates)
        return self

    def layout(self, layout: str | Layout) -> ExportRequestBuilder:
        self._layout = _enum_value(Layout, layout, "format")
        return self

    # original naming of the layout option
    format = layout

    def paper_size(self, size: str | PaperSize) -> ExportRequestBuilder:
        if isinstance(size, str):
            size = size.lower()
        self._paper_size = _enum_value(PaperSize, size, "size")
        return self

    def transmittal(self, copies: int = 0) -> ExportRequestBuilder:
        if isinstance(copies, bool) or not isinstance(copies, int) or copies < 0:
            raise InvalidConfiguration(f"Transmittal copies must be a non-negative integer: {copies!r}")
        self._transmittal = copies
        return self

    def grouping(self, grouping: str | Grouping | bool | None = Grouping.BY_OFFICE) -> ExportRequestBuilder:
        if grouping in (None, False, "0", ""):
            self._grouping = Grouping.NONE
        else:
            self._grouping = _enum_value(Grouping, grouping, "grouping")
        return self

    def signature(self, mode: str | SignatureMode | bool | None = None) -> ExportRequestBuilder:
        if mode is None or mode is False:
            self._signature = SignatureMode.NONE
        elif mode is True:
            self._signature = SignatureMode.DIGITAL
        else:
            self._signature = _enum_value(SignatureMode, mode, "signature")
        return self

    def individual(self, individual: bool = True) -> ExportRequestBuilder:
        self._individual = bool(individual)
        return self

    def misc(self, misc: dict[str, Any]) -> ExportRequestBuilder:
        self._misc = dict(misc)
        return self

    def user(self, signer: Signer | None) -> ExportRequestBuilder:
        self._signer = signer
        return self

    def single(self, single: bool) -> ExportRequestBuilder:
        self._single = bool(single)
        return self

    def build(self) -> ExportRequest:
        """Validate the whole configuration and freeze it"""
        if not self._subjects:
            raise InvalidConfiguration("No employee selected")
        if self._month is None:
            raise InvalidConfiguration("Month is required")

        check_compatibility(self._layout, self._period)

        return ExportRequest(
            subjects=self._subjects,
            single_subject=self._single_subject,
            month=self._month,
            period=self._period,
            layout=self._layout,
            paper_size=self._paper_size,
            transmittal_copies=self._transmittal,
            grouping=self._grouping,
            signature_mode=self._signature,
            individual_archive=self._individual,
            misc=self._misc,
            signer=self._signer,
            single=self._single,
        )


def parse_month(month: date | str) -> date:
    """Month anchor as the first day of the month"""
    if isinstance(month, datetime):
        month = month.date()
    if isinstance(month, date):
        return month.replace(day=1)
    try:
        parsed = datetime.strptime(month.strip()[:7], "%Y-%m")
    except (AttributeError, ValueError):
        raise InvalidConfiguration(f"Unknown month: {month!r}") from None
    return parsed.date()


def _enum_value(enum_cls: type[Enum], value: Any, option: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidConfiguration(f"Unknown {option}: {value}") from None
