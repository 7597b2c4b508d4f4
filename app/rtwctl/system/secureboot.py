"""Secure Boot detection and MOK key lookup."""

import logging
import subprocess
from pathlib import Path

from rtwctl.core.paths import DKMS_MOK_KEY, SHIM_MOK_KEY
from rtwctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

SECURE_BOOT_ENABLED_MARKER = "SecureBoot enabled"


def is_secure_boot_enabled() -> bool:
    """Check Secure Boot state via ``mokutil --sb-state``.

    Returns:
        True only if mokutil is installed and reports Secure Boot enabled.
    """
    if not command_exists("mokutil"):
        return False
    try:
        result = run_command(["mokutil", "--sb-state"], timeout=10.0)
    except (FileNotFoundError, OSError, subprocess.TimeoutExpired):
        return False
    return SECURE_BOOT_ENABLED_MARKER in result.stdout


def mok_key_path(shim_key: Path = SHIM_MOK_KEY, dkms_key: Path = DKMS_MOK_KEY) -> Path:
    """Pick the MOK public key DKMS signs modules with.

    Ubuntu/Debian keep it under shim-signed; most other distributions use
    the key DKMS generates itself.
    """
    if shim_key.is_file():
        return shim_key
    return dkms_key
