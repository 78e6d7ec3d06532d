"""
Archive packager - one PDF per subject in a store-only ZIP

Responsibilities:
1. Write entries ``<subject name>.pdf`` without compression (PDF bytes
   are already compressed)
2. Build the archive in a system temp file owned by the caller
3. Leave nothing behind when producing an entry fails (no partial
   archives)

Test points:
- test_package_store_only: entries use ZIP_STORED
- test_package_failure_removes_archive
"""

from __future__ import annotations

import logging
import os
import tempfile
import zipfile
from collections.abc import Iterable
from pathlib import Path

from ..models import RenderedDocument

logger = logging.getLogger(__name__)


class ArchivePackager:
    """Store-only ZIP writer"""

    def package(self, documents: Iterable[RenderedDocument]) -> Path:
        """
        Write all documents into a new temp ZIP

        ``documents`` may be lazy; an exception while producing one aborts
        the whole archive and removes the temp file.

        Returns:
            path of the ZIP (the caller removes it)
        """
        fd, name = tempfile.mkstemp(suffix=".zip")
        os.close(fd)
        zip_path = Path(name)

        count = 0
        try:
            with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_STORED) as zf:
                for document in documents:
                    zf.writestr(document.filename, document.content)
                    count += 1
        except BaseException:
            zip_path.unlink(missing_ok=True)
            raise

        logger.info(f"Packaged {count} documents into {zip_path.name}")
        return zip_path

