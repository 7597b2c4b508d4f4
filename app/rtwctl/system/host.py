"""Host facts: privileges, kernel release, board detection."""

import logging
import os
import platform
import re
from pathlib import Path

from rtwctl.core.paths import CPUINFO_PATH, REBOOT_REQUIRED_FLAG, get_kernel_build_dir
from rtwctl.utils.shell import run_interactive

logger = logging.getLogger(__name__)

_RPI_MODEL = re.compile(r"^Model\s*:\s*Raspberry Pi", re.MULTILINE)


def is_root() -> bool:
    """Check if the process runs with effective UID 0."""
    return os.geteuid() == 0


def kernel_release() -> str:
    """Return the running kernel release (``uname -r``)."""
    return platform.release()


def machine() -> str:
    """Return the machine architecture (``uname -m``)."""
    return platform.machine()


def headers_installed(release: str | None = None) -> bool:
    """Check if the kernel build tree exists for a release.

    Args:
        release: Kernel release. Defaults to the running kernel.
    """
    return get_kernel_build_dir(release or kernel_release()).is_dir()


def is_raspberry_pi(cpuinfo: Path = CPUINFO_PATH) -> bool:
    """Check if /proc/cpuinfo reports a Raspberry Pi model."""
    try:
        text = cpuinfo.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
    return _RPI_MODEL.search(text) is not None


def reboot_required(flag: Path = REBOOT_REQUIRED_FLAG) -> bool:
    """Check if installed updates asked for a reboot."""
    return flag.exists()


def reboot() -> int:
    """Reboot the machine via sudo.

    Returns:
        Exit code of the reboot command.
    """
    logger.info("Rebooting")
    return run_interactive(["sudo", "reboot"])
