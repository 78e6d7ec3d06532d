"""Batch size policy, checked by callers before exporting"""

from __future__ import annotations

from ..config import RuntimeConfig, get_config
from ..interfaces import TooManySubjects
from ..models import ExportRequest


def enforce_subject_limit(request: ExportRequest, config: RuntimeConfig | None = None) -> None:
    """Reject batches over the server-load limits"""
    config = config or get_config()
    limit = (
        config.export.max_individual_subjects
        if request.individual_archive
        else config.export.max_subjects
    )
    if request.subject_count > limit:
        raise TooManySubjects(request.subject_count, limit)
