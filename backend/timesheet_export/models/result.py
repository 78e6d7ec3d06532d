"""
Export results - rendered documents and programmatic export output
"""

from __future__ import annotations

from pydantic import BaseModel


class RenderedDocument(BaseModel):
    """PDF bytes plus the filename they are delivered under"""
    filename: str
    content: bytes

    model_config = {"frozen": True}


class ExportResult(BaseModel):
    """Programmatic (non-streaming) export output"""
    filename: str
    content: bytes
    content_type: str

    model_config = {"frozen": True}
