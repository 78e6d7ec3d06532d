"""
PDF signer - pyhanko command-line wrapper

Responsibilities:
1. Check a signing identity is available (fail fast otherwise)
2. Materialise certificate, specimen, password and stamp style in a
   per-call workspace directory
3. Run ``pyhanko sign addsig ... pkcs12`` with a timeout
4. Retry once without the timestamp service when it is the timestamp
   service that failed
5. Remove the workspace on every path

Workspace names derive from ``<owner id>-<input path>`` (a random id
replaces the owner for anonymous calls) plus a unique suffix, so
concurrent calls never share a directory.

Test points:
- test_command_order: flags in the order the tool expects
- test_timestamp_retry_once: one retry without --timestamp-url
- test_workspace_removed_on_failure / _on_success
- test_missing_identity: MissingSignatureConfig
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import tempfile
import uuid
from pathlib import Path
from typing import Callable

from ..config import RuntimeConfig, get_config
from ..interfaces import MissingSignatureConfig, SigningFailed
from ..models import SignatureField, SignerIdentity, SigningOptions
from .capability import detect_signer

logger = logging.getLogger(__name__)

CERTIFICATE_FILE = "certificate.pfx"
SPECIMEN_FILE = "signature.webp"
PASSWORD_FILE = "password"
STAMP_FILE = "pyhanko.yml"

DEFAULT_STAMP_STYLE = """\
stamp-styles:
  default:
    type: text
    stamp-text: "Signed by %(signer)s\\nTimestamp: %(ts)s"
    background: "signature.webp"
    background-opacity: 1
    border-width: 0
    inner-content-layout:
      y-align: bottom
"""

Runner = Callable[..., subprocess.CompletedProcess]


class PdfSigner:
    """Signs PDFs in place (or to ``out``) with the external signing tool"""

    def __init__(
        self,
        command: list[str],
        timestamp_url: str | None = None,
        location: str = "Philippines",
        timeout: int = 30,
        workspace_root: Path | None = None,
        runner: Runner | None = None,
    ):
        self.command_prefix = list(command)
        self.timestamp_url = timestamp_url or None
        self.location = location
        self.timeout = timeout
        self.workspace_root = Path(workspace_root or Path(tempfile.gettempdir()) / "timesheet-signing")
        self.runner = runner or subprocess.run

    @classmethod
    def from_config(cls, config: RuntimeConfig | None = None) -> PdfSigner:
        """Detect the signing tool and apply the signing settings"""
        config = config or get_config()
        return cls(
            command=detect_signer(config.signing.executable, config.timeouts.probe_sec),
            timestamp_url=config.signing.timestamp_url,
            location=config.signing.location,
            timeout=config.timeouts.sign_sec,
            workspace_root=config.storage.signing_dir,
        )

    def sign(
        self,
        path: Path,
        *,
        identity: SignerIdentity | None = None,
        out: Path | None = None,
        field: SignatureField | None = None,
        options: SigningOptions | None = None,
        certificate: bytes | str | Path | None = None,
        specimen: bytes | str | Path | None = None,
        password: str | None = None,
    ) -> Path:
        """
        Sign ``path``

        ``certificate``/``specimen`` are only used without ``identity``;
        existing file paths are moved into the workspace, anything else is
        written as content.

        Returns:
            path of the signed PDF

        Raises:
            MissingSignatureConfig: no identity and no raw credentials
            SigningFailed: the tool failed (after the timestamp retry)
        """
        if identity is None and not (certificate and specimen):
            raise MissingSignatureConfig("User signature is not yet configured")

        field = field or SignatureField()
        options = options or SigningOptions()
        path = Path(path).resolve()
        out = Path(out).resolve() if out else path

        owner = identity.owner_id if identity and identity.owner_id else uuid.uuid4().hex
        workspace = self._create_workspace(f"{owner}-{path}")
        try:
            self._prepare(workspace, identity, field, options, certificate, specimen, password)

            contact = options.contact or (identity.email if identity else None)
            use_timestamp = self.timestamp_url is not None
            while True:
                command = self.command(path, out, field, options, contact, timestamp=use_timestamp)
                try:
                    self._run(command, workspace)
                except SigningFailed as e:
                    if use_timestamp and "timestamp" in e.error_output.lower():
                        logger.warning(f"Timestamp service failed, signing {path.name} without it")
                        use_timestamp = False
                        continue
                    raise
                break
        finally:
            shutil.rmtree(workspace, ignore_errors=True)

        logger.info(f"Signed {out.name}")
        return out

    def command(
        self,
        path: Path,
        out: Path | None,
        field: SignatureField,
        options: SigningOptions,
        contact: str | None,
        timestamp: bool = True,
    ) -> list[str]:
        """Signing tool arguments (order matters to the tool)"""
        command = [*self.command_prefix, "--verbose", "sign", "addsig"]

        spec = field.spec()
        if spec:
            command.append(f"--field={spec}")

        if options.certify:
            command.append("--certify")

        if timestamp and self.timestamp_url:
            command.append(f"--timestamp-url={self.timestamp_url}")

        if options.reason:
            command.append(f"--reason={options.reason}")

        return [
            *command,
            f"--contact-info={contact or ''}",
            f"--location={options.location or self.location}",
            "pkcs12",
            f"--passfile={PASSWORD_FILE}",
            str(path),
            str(out or path),
            CERTIFICATE_FILE,
        ]

    def _create_workspace(self, session_id: str) -> Path:
        self.workspace_root.mkdir(parents=True, exist_ok=True)
        slug = re.sub(r"[^a-z0-9]+", "_", session_id.lower()).strip("_")[:120]
        return Path(tempfile.mkdtemp(prefix=f"{slug}_", dir=self.workspace_root))

    def _prepare(
        self,
        workspace: Path,
        identity: SignerIdentity | None,
        field: SignatureField,
        options: SigningOptions,
        certificate: bytes | str | Path | None,
        specimen: bytes | str | Path | None,
        password: str | None,
    ) -> None:
        if identity is not None:
            (workspace / CERTIFICATE_FILE).write_bytes(identity.certificate)
            (workspace / SPECIMEN_FILE).write_bytes(identity.specimen)
            password = identity.password
        else:
            _materialise(certificate, workspace / CERTIFICATE_FILE)
            _materialise(specimen, workspace / SPECIMEN_FILE)

        if field.coordinates is not None and field.page is not None:
            (workspace / STAMP_FILE).write_text(
                options.stamp_yml or DEFAULT_STAMP_STYLE, encoding="utf-8"
            )

        (workspace / PASSWORD_FILE).write_text(password or "", encoding="utf-8")

    def _run(self, command: list[str], workspace: Path) -> None:
        try:
            completed = self.runner(
                command,
                cwd=str(workspace),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise SigningFailed(f"Signing tool timed out after {self.timeout}s") from e
        except OSError as e:
            raise SigningFailed(f"Signing tool could not be started: {e}") from e

        if completed.returncode != 0:
            raise SigningFailed(
                completed.stderr or completed.stdout or f"exit status {completed.returncode}"
            )


def _materialise(source: bytes | str | Path, target: Path) -> None:
    """Move an existing file into place, or write the given content"""
    if isinstance(source, (str, Path)) and Path(source).is_file():
        shutil.move(str(source), target)
    elif isinstance(source, str):
        target.write_text(source, encoding="utf-8")
    else:
        target.write_bytes(source)
