"""Filesystem locations used by rtwctl.

Two groups of paths live here:

- XDG-compliant user paths for rtwctl's own configuration
  (``~/.config/rtwctl/``).
- Fixed system paths the installer inspects or writes (kernel build trees,
  DKMS source root, modprobe config directory, MOK key locations).
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "rtwctl"

# =============================================================================
# System paths
# =============================================================================

# Append-only installer status record
DEFAULT_STATUS_FILE = Path("/var/lib/driver_install/status.flag")

# Per-kernel module trees; <release>/build exists once headers are installed
MODULES_ROOT = Path("/lib/modules")

# DKMS copies registered sources to <root>/<name>-<version>
DKMS_SOURCE_ROOT = Path("/usr/src")

MODPROBE_DIR = Path("/etc/modprobe.d")

CPUINFO_PATH = Path("/proc/cpuinfo")

# Created by unattended-upgrades/apt when a package needs a reboot
REBOOT_REQUIRED_FLAG = Path("/var/run/reboot-required")

# Ubuntu/Debian shim-signed MOK key, and the key DKMS generates elsewhere
SHIM_MOK_KEY = Path("/var/lib/shim-signed/mok/MOK.der")
DKMS_MOK_KEY = Path("/var/lib/dkms/mok.pub")


def get_kernel_build_dir(release: str) -> Path:
    """Get the kernel build directory for a kernel release.

    Args:
        release: Kernel release string (``uname -r``).

    Returns:
        Path to /lib/modules/<release>/build.
    """
    return MODULES_ROOT / release / "build"


# =============================================================================
# User paths
# =============================================================================


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/rtwctl/ (or XDG_CONFIG_HOME/rtwctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the default installer configuration file path.

    Returns:
        Path to ~/.config/rtwctl/config.toml.
    """
    return get_config_dir() / "config.toml"
