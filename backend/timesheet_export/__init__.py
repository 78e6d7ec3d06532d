"""
Timesheet export - daily time record (DTR) PDF generation

Module layout:
- config/     runtime settings and the layout registry
- models/     data models (employees, timesheets, export requests)
- records/    date-range resolution and attendance aggregation
- doc_gen/    document rendering, transmittal covers, PDF merging, filenames
- signing/    digital signing through an external signing tool
- pipeline/   export orchestration, archives and download responses
"""

__version__ = "0.1.0"
