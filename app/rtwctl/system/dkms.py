"""DKMS (Dynamic Kernel Module Support) wrapper.

Queries, registers, and removes out-of-tree kernel modules.
"""

import logging
import re
from pathlib import Path

from rtwctl.models.target import InstallationTarget
from rtwctl.utils.shell import CommandResult, command_exists, run_command, run_interactive

logger = logging.getLogger(__name__)


class Dkms:
    """Interface to the ``dkms`` command.

    Status queries never raise: a missing dkms binary or a failing
    ``dkms status`` simply means nothing is registered.
    """

    _STATUS_TIMEOUT: float = 30.0
    _REMOVE_TIMEOUT: float = 300.0

    def is_available(self) -> bool:
        """Check if dkms is installed."""
        return command_exists("dkms")

    def status_lines(self, target: InstallationTarget) -> list[str]:
        """Return ``dkms status`` lines mentioning the target module.

        Args:
            target: Module to look for.

        Returns:
            Matching status lines, possibly empty.
        """
        try:
            result = run_command(["dkms", "status"], timeout=self._STATUS_TIMEOUT)
        except (FileNotFoundError, OSError):
            return []
        if not result.success:
            logger.debug("dkms status failed: %s", result.stderr.strip())
            return []
        return [line.strip() for line in result.lines() if target.name in line]

    def is_registered(self, target: InstallationTarget) -> bool:
        """Check if DKMS knows about the module in any state."""
        return bool(self.status_lines(target))

    def is_installed(self, target: InstallationTarget) -> bool:
        """Check if DKMS reports the module as installed for some kernel."""
        pattern = re.compile(rf"{re.escape(target.name)}.*installed")
        return any(pattern.search(line) for line in self.status_lines(target))

    def remove(self, target: InstallationTarget) -> CommandResult:
        """Remove every build of the module from DKMS.

        Args:
            target: Module to remove.

        Returns:
            CommandResult of ``dkms remove <name>/<version> --all``.
        """
        logger.info("Removing %s from DKMS", target.dkms_ref)
        return run_command(
            ["sudo", "dkms", "remove", target.dkms_ref, "--all"],
            timeout=self._REMOVE_TIMEOUT,
        )

    def install(self, source: Path) -> int:
        """Add, build, and install a module tree in one go.

        Build output is streamed to the terminal.

        Args:
            source: Directory containing dkms.conf.

        Returns:
            Exit code of ``dkms install``.
        """
        return run_interactive(["sudo", "dkms", "install", str(source)])
