"""
Signing tool detection - run once at start-up

Order:
1. explicit command from settings (``signing.executable``)
2. ``pyhanko`` on PATH
3. ``<python> -m pyhanko`` with the running interpreter

Raises SigningToolUnavailable when none answers ``--version``.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import sys

from ..interfaces import SigningToolUnavailable

logger = logging.getLogger(__name__)


def detect_signer(executable: str | None = None, timeout: int = 10) -> list[str]:
    """Command prefix of the signing tool"""
    if executable:
        command = shlex.split(executable)
        if not _responds(command, timeout):
            raise SigningToolUnavailable(f"Signing tool does not respond: {executable}")
        return command

    if shutil.which("pyhanko"):
        return ["pyhanko"]

    module_command = [sys.executable, "-m", "pyhanko"]
    if sys.executable and _responds(module_command, timeout):
        return module_command

    raise SigningToolUnavailable("PyHanko module is not found or installed")


def _responds(command: list[str], timeout: int) -> bool:
    try:
        completed = subprocess.run(
            [*command, "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Signing tool probe failed: {' '.join(command)}: {e}")
        return False
    return completed.returncode == 0
