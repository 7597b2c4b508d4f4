"""Shared state for one installer run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rtwctl.core.cleanup import CheckoutCleanup
from rtwctl.core.config import InstallerConfig
from rtwctl.core.prompt import Prompter
from rtwctl.core.status import StatusRecord
from rtwctl.models.options import RunOptions
from rtwctl.operators import detect_package_manager
from rtwctl.operators.base import PackageManager
from rtwctl.system.dkms import Dkms
from rtwctl.system.sudo import SudoKeepAlive


@dataclass
class InstallContext:
    """Everything the installer steps share.

    Attributes:
        config: Installer configuration.
        options: Parsed command-line options.
        status: Append-only status record.
        prompter: Confirmation prompts (honors unattended mode).
        cleanup: Deferred checkout removal.
        dkms: DKMS interface.
        keepalive: Sudo refresher, started during preflight.
        secure_boot: Secure Boot state detected at the start of an install.
    """

    config: InstallerConfig
    options: RunOptions
    status: StatusRecord
    prompter: Prompter
    cleanup: CheckoutCleanup
    dkms: Dkms = field(default_factory=Dkms)
    keepalive: SudoKeepAlive | None = None
    secure_boot: bool = False
    _package_manager: PackageManager | None = None

    @classmethod
    def create(
        cls,
        config: InstallerConfig,
        options: RunOptions,
        workdir: Path | None = None,
    ) -> InstallContext:
        """Build a context with the default collaborators.

        Args:
            config: Installer configuration.
            options: Parsed command-line options.
            workdir: Directory the checkout lives in. Defaults to the cwd.
        """
        return cls(
            config=config,
            options=options,
            status=StatusRecord(config.status_file),
            prompter=Prompter(unattended=options.unattended),
            cleanup=CheckoutCleanup(config.checkout_path(workdir)),
        )

    @property
    def checkout(self) -> Path:
        return self.cleanup.checkout

    @property
    def package_manager(self) -> PackageManager:
        """The host package manager, detected on first use.

        Raises:
            PackageManagerNotFoundError: If no supported manager is available.
        """
        if self._package_manager is None:
            self._package_manager = detect_package_manager()
        return self._package_manager

    def shutdown(self) -> None:
        """Run deferred actions. Safe to call more than once."""
        if self.keepalive is not None:
            self.keepalive.stop()
        self.cleanup.run()
