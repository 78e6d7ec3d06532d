"""
Download responses - streaming handles for the HTTP path

A response carries either in-memory bytes (single PDF) or a temp file
(ZIP archive) that is removed once streamed or closed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
ZIP_CONTENT_TYPE = "application/zip"


class DownloadResponse:
    """Attachment download (bytes or delete-after-send file)"""

    def __init__(
        self,
        filename: str,
        content_type: str,
        content: bytes | None = None,
        path: Path | None = None,
        chunk_size: int = 64 * 1024,
    ):
        if (content is None) == (path is None):
            raise ValueError("DownloadResponse needs exactly one of content or path")
        self.filename = filename
        self.content_type = content_type
        self.chunk_size = chunk_size
        self._content = content
        self._path = path

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": self.content_type,
            "Content-Disposition": f'attachment; filename="{self.filename}"',
        }

    def iter_chunks(self) -> Iterator[bytes]:
        """Stream the body; a backing file is deleted afterwards"""
        if self._content is not None:
            for start in range(0, len(self._content), self.chunk_size):
                yield self._content[start:start + self.chunk_size]
            return

        try:
            with open(self._path, "rb") as f:
                while True:
                    chunk = f.read(self.chunk_size)
                    if not chunk:
                        break
                    yield chunk
        finally:
            self.close()

    def read(self) -> bytes:
        return b"".join(self.iter_chunks())

    def close(self) -> None:
        if self._path is not None and self._path.exists():
            self._path.unlink()
            logger.debug(f"Removed sent file {self._path}")

    def __enter__(self) -> DownloadResponse:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
