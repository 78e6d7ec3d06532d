"""
Export pipeline - orchestration and delivery

Sub-modules:
- exporter: the export orchestrator
- packager: store-only ZIP archives
- response: streaming download handles
- policy: batch size limits
"""

from .exporter import TimesheetExporter
from .packager import ArchivePackager
from .policy import enforce_subject_limit
from .response import PDF_CONTENT_TYPE, ZIP_CONTENT_TYPE, DownloadResponse

__all__ = [
    "TimesheetExporter",
    "ArchivePackager",
    "enforce_subject_limit",
    "DownloadResponse",
    "PDF_CONTENT_TYPE",
    "ZIP_CONTENT_TYPE",
]
