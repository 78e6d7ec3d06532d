"""
Document generation - timesheet PDFs, transmittal covers, filenames

Sub-modules:
- renderer: Jinja2 print templates to PDF via headless Chromium
- transmittal: transmittal cover sheet
- merger: cover + body PDF merging
- naming: deterministic output filenames
"""

from .merger import TransmittalMerger, count_pdf_pages
from .naming import build_filename, compress_numbers, period_label
from .renderer import BrowserRenderer, paper_options
from .transmittal import TransmittalGenerator

__all__ = [
    "BrowserRenderer",
    "paper_options",
    "TransmittalGenerator",
    "TransmittalMerger",
    "count_pdf_pages",
    "build_filename",
    "compress_numbers",
    "period_label",
]
