"""Static signing identity provider (CLI and tests)"""

from __future__ import annotations

from pathlib import Path

from ..interfaces import ISignerIdentityProvider
from ..models import Signer, SignerIdentity


class StaticIdentityProvider(ISignerIdentityProvider):
    """Identities registered up front, keyed by signer id"""

    def __init__(self, identities: dict[str, SignerIdentity] | None = None):
        self._identities = dict(identities or {})

    def register(self, signer_id: str, identity: SignerIdentity) -> None:
        self._identities[signer_id] = identity

    def identity(self, signer: Signer) -> SignerIdentity | None:
        identity = self._identities.get(signer.id)
        if identity is None:
            return None
        return identity.model_copy(
            update={
                "owner_id": identity.owner_id or signer.id,
                "email": identity.email or signer.email,
            }
        )

    @staticmethod
    def load(
        certificate: Path,
        specimen: Path,
        password: str = "",
        owner_id: str | None = None,
        email: str | None = None,
    ) -> SignerIdentity:
        """Identity from certificate and specimen files"""
        return SignerIdentity(
            owner_id=owner_id,
            certificate=Path(certificate).read_bytes(),
            specimen=Path(specimen).read_bytes(),
            password=password,
            email=email,
        )
