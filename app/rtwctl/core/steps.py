"""Installer steps.

Each step wraps one stage of the install or uninstall flow: it asks the
confirmations that belong to that stage, calls into :mod:`rtwctl.core.driver`
and the system wrappers, and reports a StepResult. Steps raise
InstallerError for fatal problems; the pipeline converts those into FATAL
results.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from rtwctl.core.driver import (
    build_and_register,
    detect_existing,
    ensure_kernel_headers,
    remove_existing,
    verify_installation,
)
from rtwctl.core.errors import CloneError, PackageInstallError, PrivilegeError, RebootRequiredError
from rtwctl.core.report import print_post_install_report
from rtwctl.models.step import StepResult
from rtwctl.system import git, host, secureboot, sudo
from rtwctl.utils.formatting import print_info, print_success, print_warning

if TYPE_CHECKING:
    from rtwctl.core.context import InstallContext

logger = logging.getLogger(__name__)


class InstallerStep(ABC):
    """Abstract base class for installer steps.

    Attributes:
        step_id: Stable identifier used in logs and results.
        start_status: Status record line written before the step runs.
        failure_status: Status record line written if the step fails fatally.
    """

    step_id: str = ""
    start_status: str | None = None
    failure_status: str | None = None

    @abstractmethod
    def run(self, ctx: InstallContext) -> StepResult:
        """Execute the step.

        Args:
            ctx: Shared run state.

        Returns:
            Result describing the outcome.

        Raises:
            InstallerError: On fatal failure.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.step_id!r})"


def _driver_label(ctx: InstallContext) -> str:
    return ctx.config.module_name.upper()


# =============================================================================
# Preflight
# =============================================================================


class CheckNotRootStep(InstallerStep):
    step_id = "check_root"

    def run(self, ctx: InstallContext) -> StepResult:
        if host.is_root():
            msg = "This installer should NOT be run as root; it will request sudo when needed"
            raise PrivilegeError(msg)
        return StepResult.ok(self.step_id)


class AcquireSudoStep(InstallerStep):
    """Cache sudo credentials and keep them fresh for the rest of the run."""

    step_id = "acquire_sudo"

    def run(self, ctx: InstallContext) -> StepResult:
        if not sudo.has_cached_credentials():
            print_info("This installer requires sudo privileges")
            if not sudo.acquire_credentials():
                raise PrivilegeError("Failed to obtain sudo privileges")

        ctx.keepalive = sudo.SudoKeepAlive(interval=ctx.config.keepalive_interval)
        ctx.keepalive.start()
        return StepResult.ok(self.step_id)


# =============================================================================
# Uninstall flow
# =============================================================================


class ConfirmUninstallStep(InstallerStep):
    step_id = "confirm_uninstall"

    def run(self, ctx: InstallContext) -> StepResult:
        print_warning("Uninstall mode selected")
        question = f"Are you sure you want to uninstall the {_driver_label(ctx)} driver?"
        if not ctx.prompter.confirm(question):
            print_info("Uninstallation cancelled")
            return StepResult.declined(self.step_id, "Uninstallation cancelled")
        return StepResult.ok(self.step_id)


class RemoveDriverStep(InstallerStep):
    step_id = "remove_driver"

    def run(self, ctx: InstallContext) -> StepResult:
        warnings = remove_existing(ctx.config, ctx.dkms)
        print_success("Uninstallation complete")
        return StepResult.ok(self.step_id, "Driver removed", warnings)


# =============================================================================
# Install flow
# =============================================================================


class SecureBootStep(InstallerStep):
    step_id = "secure_boot"

    def run(self, ctx: InstallContext) -> StepResult:
        ctx.secure_boot = secureboot.is_secure_boot_enabled()
        if ctx.secure_boot:
            print_warning("Secure Boot is ENABLED")
            print_info("You will need to enroll the MOK (Machine Owner Key) after installation")
            print_info("See the post-installation instructions for details")
            return StepResult.ok(self.step_id, "Secure Boot enabled")
        print_info("Secure Boot is disabled or not detected")
        return StepResult.ok(self.step_id, "Secure Boot disabled")


class ConfirmInstallStep(InstallerStep):
    step_id = "confirm_install"

    def run(self, ctx: InstallContext) -> StepResult:
        question = f"Ready to proceed with {_driver_label(ctx)} driver installation?"
        if not ctx.prompter.confirm(question):
            ctx.status.record("Installation cancelled by user")
            print_info("Installation cancelled")
            return StepResult.declined(self.step_id, "Installation cancelled")
        return StepResult.ok(self.step_id)


class DetectExistingStep(InstallerStep):
    """Find a previous installation and offer to remove it."""

    step_id = "detect_existing"

    def run(self, ctx: InstallContext) -> StepResult:
        existing = detect_existing(ctx.config, ctx.dkms)
        if not existing.found:
            return StepResult.skipped(self.step_id, "No existing installation found")

        question = "Existing driver installation found. Remove and reinstall?"
        if not ctx.prompter.confirm(question, default=True):
            ctx.status.record("User declined to remove existing driver")
            print_info("Keeping existing installation. Exiting.")
            return StepResult.declined(self.step_id, "Existing installation kept")

        ctx.status.record("Removing existing driver")
        warnings = remove_existing(ctx.config, ctx.dkms)
        print_success("Existing driver removed")
        return StepResult.ok(self.step_id, "Existing driver removed", warnings)


class KernelHeadersStep(InstallerStep):
    step_id = "kernel_headers"
    start_status = "Checking kernel headers"
    failure_status = "Kernel headers installation failed"

    def run(self, ctx: InstallContext) -> StepResult:
        method = ensure_kernel_headers(ctx.package_manager)
        if method is None:
            return StepResult.skipped(self.step_id, "Kernel headers already installed")
        return StepResult.ok(self.step_id, f"{method.label} installed")


class SystemUpdatesStep(InstallerStep):
    """Offer pending system upgrades before building against the kernel."""

    step_id = "system_updates"

    def run(self, ctx: InstallContext) -> StepResult:
        manager = ctx.package_manager
        print_info("Checking for system updates...")
        refreshed = manager.refresh()
        if not refreshed.success:
            logger.warning("Package index refresh failed: %s", refreshed.stderr.strip())

        pending = manager.upgradable_count()
        if pending == 0:
            print_success("System is up to date")
            return StepResult.skipped(self.step_id, "System is up to date")

        print_warning(f"System has {pending} packages to upgrade")
        question = "Install system updates before driver installation?"
        if not ctx.prompter.confirm(question, default=True):
            return StepResult.skipped(self.step_id, "System updates postponed")

        ctx.status.record("Installing system updates")
        print_info("Upgrading system packages...")
        code = manager.upgrade()
        if code != 0:
            raise PackageInstallError(f"System upgrade failed (exit code {code})")
        print_success("System updated")

        if not host.reboot_required():
            return StepResult.ok(self.step_id, "System updated")

        print_warning("System reboot required after updates")
        if not ctx.prompter.confirm("Reboot now and run the installer again after reboot?"):
            raise RebootRequiredError("Reboot required before continuing")

        ctx.status.record("Rebooting for system updates")
        code = host.reboot()
        if code != 0:
            ctx.status.record("Reboot for system updates failed")
            raise RebootRequiredError(
                f"Reboot failed (exit code {code}); reboot manually and run the installer again"
            )
        return StepResult.declined(self.step_id, "Rebooting for system updates")


class RequiredPackagesStep(InstallerStep):
    step_id = "required_packages"
    start_status = "Installing required packages"
    failure_status = "Package installation failed"

    def run(self, ctx: InstallContext) -> StepResult:
        manager = ctx.package_manager
        print_info("Installing required packages...")

        missing = manager.missing(list(ctx.config.required_packages))
        if not missing:
            print_success("All required packages already installed")
            return StepResult.skipped(self.step_id, "All required packages already installed")

        print_info(f"Installing: {' '.join(missing)}")
        result = manager.install(missing)
        if not result.success:
            detail = result.stderr.strip() or f"{manager.name} exited with {result.returncode}"
            raise PackageInstallError(f"Failed to install required packages: {detail}")

        print_success("Packages installed successfully")
        return StepResult.ok(self.step_id, f"Installed {', '.join(missing)}")


class CloneSourceStep(InstallerStep):
    """Clone the driver repository, or reuse an existing checkout."""

    step_id = "clone_source"
    start_status = "Cloning driver repository"
    failure_status = "Repository clone failed"

    def run(self, ctx: InstallContext) -> StepResult:
        checkout = ctx.checkout

        if checkout.exists():
            print_warning("Repository directory already exists")
            if not ctx.prompter.confirm("Remove and re-clone?"):
                print_info(f"Using existing source tree at {checkout}")
                return StepResult.skipped(self.step_id, "Using existing source tree")
            try:
                shutil.rmtree(checkout)
            except OSError as e:
                raise CloneError(f"Could not remove {checkout}: {e}") from e

        print_info(f"Cloning {ctx.config.module_name} driver repository...")
        ctx.cleanup.mark_cloned()
        try:
            result = git.clone(ctx.config.repo_url, checkout)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise CloneError(f"Failed to clone repository: {e}") from e
        if not result.success:
            raise CloneError(f"Failed to clone repository: {result.stderr.strip()}")

        print_success("Repository cloned successfully")
        return StepResult.ok(self.step_id, f"Cloned {ctx.config.repo_url}")


class BuildDriverStep(InstallerStep):
    step_id = "build_driver"
    start_status = "Installing driver via DKMS"
    failure_status = "Driver installation failed"

    def run(self, ctx: InstallContext) -> StepResult:
        warnings = build_and_register(ctx.config, ctx.dkms, ctx.checkout)
        return StepResult.ok(self.step_id, "Driver built and registered", warnings)


class VerifyStep(InstallerStep):
    step_id = "verify"
    start_status = "Verifying installation"

    def run(self, ctx: InstallContext) -> StepResult:
        warnings = verify_installation(ctx.config, ctx.dkms)
        if warnings:
            print_warning("Installation verification had issues")
        return StepResult.ok(self.step_id, "Verification finished", warnings)


class KeepSourceStep(InstallerStep):
    """Ask whether the freshly cloned sources should survive the run."""

    step_id = "keep_source"

    def run(self, ctx: InstallContext) -> StepResult:
        if not ctx.cleanup.cloned:
            return StepResult.skipped(self.step_id, "Existing source tree left in place")

        if ctx.prompter.confirm("Keep source repository for future updates/uninstall?"):
            ctx.cleanup.keep_checkout = True
            print_info(f"Repository kept at: {ctx.checkout}")
            return StepResult.ok(self.step_id, "Source repository kept")
        return StepResult.ok(self.step_id, "Source repository will be removed")


class ReportStep(InstallerStep):
    step_id = "report"
    start_status = "Installation complete"

    def run(self, ctx: InstallContext) -> StepResult:
        kept = ctx.checkout.is_dir() and (ctx.cleanup.keep_checkout or not ctx.cleanup.cloned)
        print_post_install_report(
            ctx.config,
            secure_boot=ctx.secure_boot,
            mok_key=secureboot.mok_key_path(),
            checkout_kept=kept,
        )
        return StepResult.ok(self.step_id)


class RebootStep(InstallerStep):
    step_id = "reboot"

    def run(self, ctx: InstallContext) -> StepResult:
        if ctx.prompter.confirm("Reboot now to complete installation?", default=True):
            ctx.status.record("Rebooting after successful installation")
            code = host.reboot()
            if code == 0:
                return StepResult.ok(self.step_id, "Rebooting")
            ctx.status.record("Reboot failed - manual reboot pending")
            print_warning(f"Reboot failed (exit code {code}), please reboot manually")
            return StepResult.ok(
                self.step_id, "Manual reboot pending", [f"Reboot failed (exit code {code})"]
            )

        ctx.status.record("Installation complete - manual reboot pending")
        print_warning("Please reboot to complete the installation")
        return StepResult.ok(self.step_id, "Manual reboot pending")
