"""
Digital signing - external signing tool adapter

Sub-modules:
- capability: start-up detection of the signing tool
- signer: per-call workspace, command construction, timestamp fallback
- identity: static signing identity provider
"""

from .capability import detect_signer
from .identity import StaticIdentityProvider
from .signer import DEFAULT_STAMP_STYLE, PdfSigner

__all__ = [
    "detect_signer",
    "PdfSigner",
    "DEFAULT_STAMP_STYLE",
    "StaticIdentityProvider",
]
