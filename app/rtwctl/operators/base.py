"""Abstract base class for package managers.

This module defines the PackageManager interface the installer uses to
query and install distribution packages.
"""

from abc import ABC, abstractmethod

from rtwctl.utils.shell import CommandResult


class PackageManager(ABC):
    """Abstract base class for distribution package managers.

    Example:
        >>> manager = AptPackageManager()
        >>> if manager.is_available():
        ...     missing = manager.missing(["dkms", "git"])
        ...     manager.install(missing)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name of the package manager (e.g., 'apt')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system."""

    @abstractmethod
    def refresh(self) -> CommandResult:
        """Refresh the package index."""

    @abstractmethod
    def install(self, packages: list[str]) -> CommandResult:
        """Install one or more packages.

        Args:
            packages: Package names to install.

        Returns:
            CommandResult of the install transaction.
        """

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """Check if a package is installed."""

    @abstractmethod
    def has_package(self, package: str) -> bool:
        """Check if the package index offers a package by exact name."""

    @abstractmethod
    def upgradable_count(self) -> int:
        """Count packages with a pending upgrade."""

    @abstractmethod
    def upgrade(self) -> int:
        """Upgrade all packages, streaming output to the terminal.

        Returns:
            Exit code of the upgrade.
        """

    def missing(self, packages: list[str]) -> list[str]:
        """Filter a package list down to packages not yet installed.

        Args:
            packages: Package names to check.

        Returns:
            Packages that still need installing, in input order.
        """
        return [pkg for pkg in packages if not self.is_installed(pkg)]
