"""Driver install and removal operations.

These functions do the actual work behind the installer steps. Fatal
problems raise an InstallerError subclass; non-critical ones are printed
as warnings and returned so the caller can report them.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from rtwctl.core.errors import BuildError, HeadersError
from rtwctl.system import host, kmod
from rtwctl.utils.formatting import print_info, print_success, print_warning
from rtwctl.utils.shell import run_command, run_interactive

if TYPE_CHECKING:
    from rtwctl.core.config import InstallerConfig
    from rtwctl.operators.base import PackageManager
    from rtwctl.system.dkms import Dkms

logger = logging.getLogger(__name__)


# =============================================================================
# Existing installation
# =============================================================================


@dataclass(frozen=True, slots=True)
class ExistingInstall:
    """What is left of a previous installation.

    Attributes:
        loaded_modules: Loaded kernel modules matching the driver prefix,
            in lsmod order.
        dkms_entries: ``dkms status`` lines mentioning the module.
    """

    loaded_modules: tuple[str, ...] = ()
    dkms_entries: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        """Check if anything of a previous installation is present."""
        return bool(self.loaded_modules or self.dkms_entries)


def detect_existing(config: InstallerConfig, dkms: Dkms) -> ExistingInstall:
    """Look for loaded driver modules and DKMS registrations.

    Args:
        config: Installer configuration.
        dkms: DKMS interface.

    Returns:
        ExistingInstall describing what was found.
    """
    existing = ExistingInstall(
        loaded_modules=tuple(kmod.loaded_modules(config.module_prefix)),
        dkms_entries=tuple(dkms.status_lines(config.target)),
    )

    if existing.loaded_modules:
        print_warning(f"{config.module_name} driver module(s) currently loaded:")
        for module in existing.loaded_modules:
            print_info(f"  - {module}")
    if existing.dkms_entries:
        print_warning("DKMS installation(s) found:")
        for entry in existing.dkms_entries:
            print_info(f"  - {entry}")

    return existing


def _remove_path(path: Path, *, recursive: bool) -> bool:
    args = ["sudo", "rm", "-rf" if recursive else "-f", str(path)]
    try:
        return run_command(args).success
    except OSError:
        return False


def remove_existing(config: InstallerConfig, dkms: Dkms) -> list[str]:
    """Remove every trace of a previous installation.

    Modules are unloaded in reverse lsmod order so dependents go before
    the modules they use. None of the sub-steps is fatal.

    Args:
        config: Installer configuration.
        dkms: DKMS interface.

    Returns:
        Warnings collected along the way.
    """
    warnings: list[str] = []
    target = config.target
    print_info("Removing existing driver installation...")

    modules = kmod.loaded_modules(config.module_prefix)
    if modules:
        print_info(f"Unloading {config.module_name} driver modules...")
        for module in reversed(modules):
            print_info(f"  Unloading: {module}")
            try:
                unloaded = kmod.unload_module(module).success
            except OSError:
                unloaded = False
            if not unloaded:
                message = f"Could not unload {module}"
                print_warning(message)
                warnings.append(message)

    if dkms.is_registered(target):
        print_info("Removing DKMS installation(s)...")
        result = dkms.remove(target)
        if result.success:
            print_success("DKMS entries removed")
        else:
            message = f"dkms remove {target.dkms_ref} failed: {result.stderr.strip()}"
            print_warning(message)
            warnings.append(message)

    if target.source_dir.is_dir():
        print_info("Cleaning up old source directory...")
        if not _remove_path(target.source_dir, recursive=True):
            message = f"Could not remove {target.source_dir}"
            print_warning(message)
            warnings.append(message)

    if config.installed_config_path.is_file():
        print_info("Removing old configuration file...")
        if not _remove_path(config.installed_config_path, recursive=False):
            message = f"Could not remove {config.installed_config_path}"
            print_warning(message)
            warnings.append(message)

    return warnings


# =============================================================================
# Kernel headers
# =============================================================================


@dataclass(frozen=True, slots=True)
class HeaderMethod:
    """One way of getting kernel headers onto the system.

    Attributes:
        label: Description shown to the user.
        packages: Packages to install.
        applies: Predicate deciding whether to try this method at all.
    """

    label: str
    packages: tuple[str, ...]
    applies: Callable[[], bool]


def header_methods(manager: PackageManager, release: str) -> list[HeaderMethod]:
    """Kernel header install methods, most specific first.

    Args:
        manager: Package manager used for availability checks.
        release: Kernel release the headers are for.
    """
    exact = f"linux-headers-{release}"
    return [
        HeaderMethod(
            label="Raspberry Pi kernel headers",
            packages=("raspberrypi-kernel-headers", "build-essential"),
            applies=host.is_raspberry_pi,
        ),
        HeaderMethod(
            label=f"Kernel headers ({exact})",
            packages=(exact,),
            applies=lambda: manager.has_package(exact),
        ),
        HeaderMethod(
            label="Generic kernel headers",
            packages=("linux-headers-generic",),
            applies=lambda: True,
        ),
    ]


def ensure_kernel_headers(manager: PackageManager, release: str | None = None) -> HeaderMethod | None:
    """Make sure the kernel build tree exists for the running kernel.

    Methods are tried in order and the first successful install wins;
    later methods are not attempted.

    Args:
        manager: Package manager to install headers with.
        release: Kernel release. Defaults to the running kernel.

    Returns:
        The method that installed headers, or None if they were already present.

    Raises:
        HeadersError: If every applicable method failed.
    """
    release = release or host.kernel_release()
    print_info(f"Checking kernel headers for: {release}")

    if host.headers_installed(release):
        print_success("Kernel headers already installed")
        return None

    print_warning("Kernel headers not found, attempting to install...")
    refreshed = manager.refresh()
    if not refreshed.success:
        logger.warning("Package index refresh failed: %s", refreshed.stderr.strip())

    for method in header_methods(manager, release):
        if not method.applies():
            logger.debug("Skipping header method: %s", method.label)
            continue
        print_info(f"Installing {method.label}: {' '.join(method.packages)}")
        result = manager.install(list(method.packages))
        if result.success:
            print_success(f"{method.label} installed")
            return method
        logger.warning("%s failed: %s", method.label, result.stderr.strip())

    msg = (
        f"Could not install kernel headers for {release}. "
        "Please install kernel headers manually for your distribution."
    )
    raise HeadersError(msg)


# =============================================================================
# Build, register, verify
# =============================================================================


def build_and_register(config: InstallerConfig, dkms: Dkms, checkout: Path) -> list[str]:
    """Build the driver with DKMS, then install firmware and modprobe config.

    Args:
        config: Installer configuration.
        dkms: DKMS interface.
        checkout: Driver source tree.

    Returns:
        Warnings from the firmware and config-file sub-steps.

    Raises:
        BuildError: If the source tree is missing or ``dkms install`` fails.
    """
    warnings: list[str] = []
    print_info(f"Installing {config.module_name} driver via DKMS...")
    print_info(f"  Kernel: {host.kernel_release()}")
    print_info(f"  Architecture: {host.machine()}")

    if not checkout.is_dir():
        raise BuildError(f"Source directory {checkout} does not exist")
    if not dkms.is_available():
        raise BuildError("dkms is not installed")

    try:
        code = dkms.install(checkout)
    except OSError as e:
        raise BuildError(f"Could not run dkms: {e}") from e
    if code != 0:
        raise BuildError(f"DKMS installation failed (exit code {code})")
    print_success("Driver built and installed via DKMS")

    print_info("Installing firmware...")
    try:
        fw_code = run_interactive(["sudo", "make", "install_fw"], cwd=str(checkout))
    except OSError as e:
        logger.warning("make install_fw could not run: %s", e)
        fw_code = -1
    if fw_code == 0:
        print_success("Firmware installed")
    else:
        message = "Firmware installation had issues (may not be critical)"
        print_warning(message)
        warnings.append(message)

    print_info("Installing configuration file...")
    source_conf = checkout / config.config_file
    try:
        copied = run_command(["sudo", "cp", str(source_conf), f"{config.modprobe_dir}/"])
        copy_ok = copied.success
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("Copying %s failed: %s", source_conf, e)
        copy_ok = False
    if copy_ok:
        print_success("Configuration file installed")
    else:
        message = "Could not install configuration file"
        print_warning(message)
        warnings.append(message)

    return warnings


def verify_installation(config: InstallerConfig, dkms: Dkms) -> list[str]:
    """Check DKMS registration and the modprobe config file.

    Never raises; every problem is returned as a warning.

    Args:
        config: Installer configuration.
        dkms: DKMS interface.

    Returns:
        Warnings, empty when everything checks out.
    """
    warnings: list[str] = []
    target = config.target
    print_info("Verifying installation...")

    if dkms.is_installed(target):
        print_success("DKMS module registered and installed:")
        for line in dkms.status_lines(target):
            print_info(f"  {line}")
    else:
        message = "DKMS module not properly installed"
        print_warning(message)
        warnings.append(message)

    if config.installed_config_path.is_file():
        print_success("Configuration file present")
    else:
        message = "Configuration file not found"
        print_warning(message)
        warnings.append(message)

    return warnings
