"""
Timesheet exporter - orchestrates one export request

Responsibilities:
1. Reject incompatible layout/period combinations before any work
2. Resolve the period and aggregate the subjects' records
3. Render one PDF for the batch, or one per subject into a ZIP
4. Prepend the transmittal cover when copies are requested
5. Digitally sign every finished document when requested
6. Name the output deterministically and hand it back as a streaming
   download or as raw bytes

Any failure aborts the whole export; a ZIP is never partially produced.

Test points:
- test_default_layout_rejects_row_filters: no rendering happens
- test_individual_archive_store_only: ZIP entries are not compressed
- test_transmittal_merged_first: cover precedes each body
- test_digital_signing_each_document
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections import Counter
from pathlib import Path
from typing import Any

from ..config import LayoutSpec, RuntimeConfig, get_config, load_layouts
from ..doc_gen import BrowserRenderer, TransmittalGenerator, TransmittalMerger, build_filename
from ..interfaces import (
    IAttendanceStore,
    IDocumentRenderer,
    IPdfMerger,
    ISignerIdentityProvider,
    MissingSignatureConfig,
    SigningToolUnavailable,
)
from ..models import (
    ExportRequest,
    ExportResult,
    PeriodKind,
    RenderedDocument,
    SignatureField,
    SignerIdentity,
    SigningOptions,
    Timesheet,
    check_compatibility,
)
from ..records import DateSet, RangeResolver, RecordAggregator
from ..signing import PdfSigner
from .packager import ArchivePackager
from .response import PDF_CONTENT_TYPE, ZIP_CONTENT_TYPE, DownloadResponse

logger = logging.getLogger(__name__)


class TimesheetExporter:
    """Export orchestrator"""

    def __init__(
        self,
        store: IAttendanceStore,
        renderer: IDocumentRenderer | None = None,
        merger: IPdfMerger | None = None,
        signer: PdfSigner | None = None,
        identities: ISignerIdentityProvider | None = None,
        config: RuntimeConfig | None = None,
        layouts: LayoutSpec | None = None,
        packager: ArchivePackager | None = None,
    ):
        self.config = config or get_config()
        self.layouts = layouts or load_layouts(self.config.layouts_path)
        self.resolver = RangeResolver()
        self.aggregator = RecordAggregator(store, self.resolver)
        self.renderer = renderer or BrowserRenderer(config=self.config)
        self.transmittal = TransmittalGenerator(self.renderer, self.layouts)
        self.merger = merger or TransmittalMerger(config=self.config)
        self.signer = signer
        self.identities = identities
        self.packager = packager or ArchivePackager()

    def download(self, request: ExportRequest, download: bool = True) -> DownloadResponse | ExportResult:
        """
        Run the export

        Args:
            request: frozen export configuration
            download: True for a streaming download handle, False for
                a raw ``ExportResult``
        """
        check_compatibility(request.layout, request.period)

        identity = self._signing_identity(request) if request.signature_mode.digital else None

        name = self.filename(request)
        logger.info(f"Exporting {name} ({request.subject_count} subjects)")

        timesheets = self.aggregator.aggregate(request)

        try:
            if request.individual_archive:
                return self._export_as_zip(request, timesheets, identity, name, download)
            return self._export_as_pdf(request, timesheets, identity, name, download)
        except Exception:
            logger.exception(f"Export failed: {name}")
            raise

    def filename(self, request: ExportRequest) -> str:
        return build_filename(
            request.month,
            request.period,
            request.subjects,
            single_subject=request.single_subject,
            layouts=self.layouts,
        )

    def context(self, request: ExportRequest, timesheets: list[Timesheet]) -> dict[str, Any]:
        """Template variables shared by the body and the transmittal"""
        resolved = self.resolver.resolve(request.month, request.period)
        custom_dates = isinstance(resolved, DateSet)
        mode = request.signature_mode

        return {
            "size": request.paper_size.value,
            "layout": request.layout.value,
            "month": request.month,
            "period": request.period.kind.value,
            "from": None if custom_dates else resolved.start,
            "to": None if custom_dates else resolved.end,
            "dates": list(request.period.dates) if request.period.kind is PeriodKind.CUSTOM_DATES else None,
            "days": list(resolved.days()),
            "timesheets": timesheets,
            "employees": [sheet.employee for sheet in timesheets],
            "user": request.signer,
            "misc": request.misc,
            "single": request.single,
            "signature": mode.electronic,
            "signed": mode.digital,
        }

    # ------------------------------------------------------------------
    # Output shapes
    # ------------------------------------------------------------------

    def _export_as_zip(
        self,
        request: ExportRequest,
        timesheets: list[Timesheet],
        identity: SignerIdentity | None,
        name: str,
        download: bool,
    ) -> DownloadResponse | ExportResult:
        filename = f"{name}.zip"
        entries = entry_names(timesheets)

        documents = (
            RenderedDocument(
                filename=entry,
                content=self._document(request, [sheet], identity),
            )
            for entry, sheet in zip(entries, timesheets)
        )
        zip_path = self.packager.package(documents)

        if download:
            return DownloadResponse(filename, ZIP_CONTENT_TYPE, path=zip_path)

        try:
            return ExportResult(
                filename=filename,
                content=zip_path.read_bytes(),
                content_type=ZIP_CONTENT_TYPE,
            )
        finally:
            zip_path.unlink(missing_ok=True)

    def _export_as_pdf(
        self,
        request: ExportRequest,
        timesheets: list[Timesheet],
        identity: SignerIdentity | None,
        name: str,
        download: bool,
    ) -> DownloadResponse | ExportResult:
        filename = f"{name}.pdf"
        content = self._document(request, timesheets, identity)

        if download:
            return DownloadResponse(filename, PDF_CONTENT_TYPE, content=content)

        return ExportResult(filename=filename, content=content, content_type=PDF_CONTENT_TYPE)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def _document(
        self,
        request: ExportRequest,
        timesheets: list[Timesheet],
        identity: SignerIdentity | None,
    ) -> bytes:
        content = self._pdf(request, timesheets)
        if identity is not None:
            content = self._signed(request, content, identity)
        return content

    def _pdf(self, request: ExportRequest, timesheets: list[Timesheet]) -> bytes:
        context = self.context(request, timesheets)
        template = self.layouts.template_for(request.layout.value)
        body = self.renderer.render(template, request.paper_size, context)

        if request.transmittal_copies > 0:
            cover = self.transmittal.generate(request, timesheets, context)
            body = self.merger.merge(cover, body)

        return body

    def _signed(self, request: ExportRequest, content: bytes, identity: SignerIdentity) -> bytes:
        """Sign through a temp file private to this call"""
        fd, name = tempfile.mkstemp(suffix=".pdf")
        os.close(fd)
        path = Path(name)
        try:
            path.write_bytes(content)
            self.signer.sign(
                path,
                identity=identity,
                field=self._signature_field(request),
                options=SigningOptions(
                    certify=self.config.signing.certify,
                    reason=self.config.signing.reason,
                ),
            )
            return path.read_bytes()
        finally:
            path.unlink(missing_ok=True)

    def _signature_field(self, request: ExportRequest) -> SignatureField:
        signing = self.config.signing
        return SignatureField(
            name=signing.field_name,
            page=signing.page,
            coordinates=signing.coordinates.get(request.paper_size.value),
        )

    def _signing_identity(self, request: ExportRequest) -> SignerIdentity:
        if self.signer is None:
            raise SigningToolUnavailable("Digital signing requested but no signing tool is configured")
        if request.signer is None or self.identities is None:
            raise MissingSignatureConfig("Digital signing requested without a signer")
        identity = self.identities.identity(request.signer)
        if identity is None:
            raise MissingSignatureConfig(f"Signature of {request.signer.name} is not yet configured")
        return identity


def entry_names(timesheets: list[Timesheet]) -> list[str]:
    """``<name>.pdf`` per subject; shared names get the employee id appended"""
    counts = Counter(sheet.employee.name for sheet in timesheets)
    return [
        f"{sheet.employee.name} ({sheet.employee.id}).pdf"
        if counts[sheet.employee.name] > 1
        else f"{sheet.employee.name}.pdf"
        for sheet in timesheets
    ]
