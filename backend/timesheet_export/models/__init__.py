"""
Data models - the structures every module exchanges

- Employee / Signer: subjects and the exporting user
- TimeLog / Timetable / Timesheet: attendance data with view markers
- PeriodSelector: which part of the month is exported
- ExportRequest: frozen export configuration (built by ExportRequestBuilder)
- SignerIdentity / SignatureField / SigningOptions: digital signing inputs
- RenderedDocument / ExportResult: outputs
"""

from .employee import Employee, LogState, Signer, TimeLog, Timesheet, Timetable
from .period import PeriodKind, PeriodSelector, clean_dates
from .request import (
    ExportRequest,
    ExportRequestBuilder,
    Grouping,
    Layout,
    PaperSize,
    SignatureMode,
    check_compatibility,
    parse_month,
)
from .result import ExportResult, RenderedDocument
from .signing import SignatureField, SignerIdentity, SigningOptions

__all__ = [
    "Employee",
    "Signer",
    "LogState",
    "TimeLog",
    "Timetable",
    "Timesheet",
    "PeriodKind",
    "PeriodSelector",
    "clean_dates",
    "ExportRequest",
    "ExportRequestBuilder",
    "Layout",
    "PaperSize",
    "Grouping",
    "SignatureMode",
    "check_compatibility",
    "parse_month",
    "RenderedDocument",
    "ExportResult",
    "SignerIdentity",
    "SignatureField",
    "SigningOptions",
]
