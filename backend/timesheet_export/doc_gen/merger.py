"""
Transmittal merger - puts the cover sheet in front of the timesheets

Responsibilities:
1. Concatenate cover then body (all pages, contiguous numbering)
2. Stage both inputs in the shared scratch directory under
   request-unique names, removed once merged
3. Count PDF pages

Dependencies:
- PyPDF2: merging and page counting

Test points:
- test_merge_order: cover pages precede body pages
- test_merge_cleans_scratch: no scratch files left behind
- test_merge_invalid_pdf: MergeFailure
"""

from __future__ import annotations

import io
import logging
import uuid
from pathlib import Path

from PyPDF2 import PdfMerger, PdfReader
from PyPDF2.errors import PyPdfError

from ..config import RuntimeConfig, get_config
from ..interfaces import IPdfMerger, MergeFailure

logger = logging.getLogger(__name__)


class TransmittalMerger(IPdfMerger):
    """PyPDF2 merger over a shared scratch directory"""

    def __init__(self, scratch_dir: Path | None = None, config: RuntimeConfig | None = None):
        config = config or get_config()
        self.scratch_dir = Path(scratch_dir or config.storage.scratch_dir)

    def merge(self, cover: bytes, body: bytes) -> bytes:
        self.scratch_dir.mkdir(parents=True, exist_ok=True)

        token = uuid.uuid4().hex
        cover_path = self.scratch_dir / f"{token}-cover.pdf"
        body_path = self.scratch_dir / f"{token}-body.pdf"

        merger = PdfMerger()
        try:
            cover_path.write_bytes(cover)
            body_path.write_bytes(body)

            merger.append(str(cover_path))
            merger.append(str(body_path))

            output = io.BytesIO()
            merger.write(output)
        except (PyPdfError, ValueError) as e:
            raise MergeFailure(f"Transmittal merge failed: {e}") from e
        finally:
            merger.close()
            for path in (cover_path, body_path):
                path.unlink(missing_ok=True)

        logger.info(f"Merged transmittal ({len(cover)} + {len(body)} bytes)")
        return output.getvalue()


def count_pdf_pages(content: bytes) -> int:
    """Number of pages in a PDF byte stream"""
    return len(PdfReader(io.BytesIO(content)).pages)
