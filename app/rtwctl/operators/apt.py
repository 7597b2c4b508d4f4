"""APT package manager implementation.

Installs and queries packages using apt-get, apt-cache, apt and dpkg.
"""

import logging

from rtwctl.operators.base import PackageManager
from rtwctl.utils.shell import CommandResult, command_exists, run_command, run_interactive

logger = logging.getLogger(__name__)


class AptPackageManager(PackageManager):
    """Package manager for Debian-family systems.

    Modifying operations run through sudo; queries run unprivileged.
    """

    # apt-get install may download hundreds of MB (kernel headers)
    _APT_TIMEOUT: float | None = None
    _QUERY_TIMEOUT: float = 60.0

    # Marker apt uses on every pending upgrade line
    _UPGRADABLE_MARKER = "[upgradable from:"

    @property
    def name(self) -> str:
        return "apt"

    def is_available(self) -> bool:
        """Check if apt-get and dpkg are available."""
        return command_exists("apt-get") and command_exists("dpkg")

    def refresh(self) -> CommandResult:
        """Run ``apt-get update`` quietly."""
        logger.info("Refreshing APT package index")
        return run_command(["sudo", "apt-get", "update", "-qq"], timeout=self._APT_TIMEOUT)

    def install(self, packages: list[str]) -> CommandResult:
        """Install packages using apt-get install.

        apt-get runs one transaction, so all packages succeed or fail together.

        Args:
            packages: Package names to install.

        Returns:
            CommandResult of apt-get. An empty list succeeds without running anything.
        """
        if not packages:
            return CommandResult(stdout="", stderr="", returncode=0)

        logger.info("Executing APT install for packages: %s", ", ".join(packages))
        return run_command(
            ["sudo", "apt-get", "install", "-y", *packages],
            timeout=self._APT_TIMEOUT,
        )

    def is_installed(self, package: str) -> bool:
        """Check the dpkg selection state for ``ii`` (installed)."""
        try:
            result = run_command(["dpkg", "-l", package], timeout=self._QUERY_TIMEOUT)
        except (FileNotFoundError, OSError):
            return False
        if not result.success:
            return False
        return any(line.startswith("ii") for line in result.stdout.splitlines())

    def has_package(self, package: str) -> bool:
        """Check if ``apt-cache search`` finds the exact package name."""
        result = run_command(
            ["apt-cache", "search", f"^{package}$"],
            timeout=self._QUERY_TIMEOUT,
        )
        if not result.success:
            return False
        return any(line.split(" ", 1)[0] == package for line in result.lines())

    def upgradable_count(self) -> int:
        """Count lines of ``apt list --upgradable`` describing an upgrade."""
        result = run_command(["apt", "list", "--upgradable"], timeout=self._QUERY_TIMEOUT)
        if not result.success:
            logger.debug("apt list --upgradable failed: %s", result.stderr.strip())
            return 0
        return sum(1 for line in result.lines() if self._UPGRADABLE_MARKER in line)

    def upgrade(self) -> int:
        """Run ``apt-get upgrade -y`` with output on the terminal."""
        logger.info("Upgrading system packages")
        return run_interactive(["sudo", "apt-get", "upgrade", "-y"])
