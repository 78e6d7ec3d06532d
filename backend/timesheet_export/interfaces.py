"""
Module contracts - abstract collaborator interfaces and exceptions

Design rules:
1. Modules talk through these interfaces, never through concrete classes
2. Every interface states its inputs and outputs
3. Collaborators can be swapped for fakes in unit tests

Usage:
    from timesheet_export.interfaces import IAttendanceStore

    class SqlAttendanceStore(IAttendanceStore):
        def timesheet(self, employee: Employee, month: date) -> Timesheet | None:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import Employee, PaperSize, Signer, SignerIdentity, TimeLog, Timesheet


# ============================================================================
# Attendance and identity collaborators
# ============================================================================

class IAttendanceStore(ABC):
    """Attendance store - timesheets and raw scanner logs per employee"""

    @abstractmethod
    def timesheet(self, employee: Employee, month: date) -> Timesheet | None:
        """
        Full-month timesheet (one timetable row per day)

        Args:
            employee: the subject
            month: first day of the month

        Returns:
            the timesheet, or None when the employee has none for the month
        """
        ...

    @abstractmethod
    def time_logs(self, employee: Employee, start: date, end: date) -> list[TimeLog]:
        """
        Scanner in/out events between two days (inclusive)

        Returns:
            the events in chronological order
        """
        ...


class ISignerIdentityProvider(ABC):
    """Signing identity provider - certificate, specimen and password"""

    @abstractmethod
    def identity(self, signer: Signer) -> SignerIdentity | None:
        """Signing identity for a user, None when not configured"""
        ...


# ============================================================================
# Document generation
# ============================================================================

class IDocumentRenderer(ABC):
    """Document renderer - template + data to PDF bytes"""

    @abstractmethod
    def render(self, layout_name: str, paper_size: PaperSize, context: dict[str, Any]) -> bytes:
        """
        Render a print template to PDF

        Args:
            layout_name: template name from the layout registry
            paper_size: output paper size (folio uses explicit dimensions)
            context: template variables

        Returns:
            PDF bytes

        Raises:
            RenderFailure: the renderer failed or timed out
        """
        ...


class IPdfMerger(ABC):
    """PDF merger - cover sheet in front of the body"""

    @abstractmethod
    def merge(self, cover: bytes, body: bytes) -> bytes:
        """Concatenate cover then body, pages renumbered contiguously"""
        ...


# ============================================================================
# Exceptions
# ============================================================================

class TimesheetExportError(Exception):
    """Base exception"""
    pass


class InvalidConfiguration(TimesheetExportError):
    """Bad option value or incompatible option combination"""
    pass


class MissingSignatureConfig(TimesheetExportError):
    """Signing requested without an available signing identity"""
    pass


class RenderFailure(TimesheetExportError):
    """Document renderer failed or timed out"""
    pass


class MergeFailure(TimesheetExportError):
    """Cover/body PDF merge failed"""
    pass


class SigningToolUnavailable(TimesheetExportError):
    """The external signing tool could not be found"""
    pass


class SigningFailed(TimesheetExportError):
    """Signing subprocess failed (after the timestamp fallback retry)"""

    def __init__(self, error_output: str):
        super().__init__(error_output)
        self.error_output = error_output


class TooManySubjects(TimesheetExportError):
    """Batch export over the subject limit"""

    def __init__(self, count: int, limit: int):
        super().__init__(
            f"Too many records: {count} selected, at most {limit} allowed per export"
        )
        self.count = count
        self.limit = limit
