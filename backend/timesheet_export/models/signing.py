"""
Signing models - identity material and signature placement
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SignerIdentity(BaseModel):
    """Certificate, specimen image and password of one signer"""
    owner_id: str | None = None
    certificate: bytes = Field(..., description="PKCS#12 (.pfx) bytes")
    specimen: bytes = Field(..., description="Signature specimen image (webp)")
    password: str = ""
    email: str | None = None


class SignatureField(BaseModel):
    """Signature field; coordinates given means a new visible field"""
    name: str = "Signature"
    page: int = 1
    coordinates: str | None = Field(None, description="x1,y1,x2,y2 in points")

    def spec(self) -> str:
        """pyhanko --field value"""
        if self.coordinates is not None and self.page is not None:
            return f"{self.page}/{self.coordinates}/{self.name}"
        return self.name


class SigningOptions(BaseModel):
    """Per-call signing options"""
    certify: bool = False
    reason: str | None = None
    contact: str | None = None
    location: str | None = None
    # custom pyhanko.yml contents, replaces the default stamp style
    stamp_yml: str | None = None
