"""
Transmittal generator - cover sheet listing the exported timesheets

Responsibilities:
1. Build the cover context (copies, layout, period, employees)
2. Render it with the transmittal template at the export's paper size

Test points:
- test_transmittal_context: requested copies reach the template
- test_transmittal_employees_from_timesheets
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config import LayoutSpec, load_layouts
from ..interfaces import IDocumentRenderer

if TYPE_CHECKING:
    from ..models import ExportRequest, Timesheet


class TransmittalGenerator:
    """Renders the transmittal cover of an export"""

    def __init__(self, renderer: IDocumentRenderer, layouts: LayoutSpec | None = None):
        self.renderer = renderer
        self.layouts = layouts or load_layouts()

    def generate(
        self,
        request: ExportRequest,
        timesheets: list[Timesheet],
        context: dict[str, Any],
    ) -> bytes:
        """Cover PDF for the given body context"""
        data = self._prepare_data(request, timesheets, context)
        return self.renderer.render(
            self.layouts.transmittal_template, request.paper_size, data
        )

    def _prepare_data(
        self,
        request: ExportRequest,
        timesheets: list[Timesheet],
        context: dict[str, Any],
    ) -> dict[str, Any]:
        return {
            **context,
            "format": request.layout.value,
            "copies": request.transmittal_copies,
            "employees": [sheet.employee for sheet in timesheets],
        }
