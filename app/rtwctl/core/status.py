"""Append-only installer status record.

This module provides the StatusRecord class for persisting installer
milestones to a line-oriented log file.
"""

import logging
from pathlib import Path

from rtwctl.models.status import StatusEntry, create_status_entry
from rtwctl.utils.formatting import print_warning
from rtwctl.utils.shell import run_command

logger = logging.getLogger(__name__)


class StatusRecord:
    """Manages the installer status file.

    Storage location: /var/lib/driver_install/status.flag (configurable)

    Lines are only ever appended, never rewritten. The file usually lives
    in a root-owned directory while rtwctl itself runs as a regular user,
    so writes that hit a PermissionError are retried through
    ``sudo tee -a``.

    Attributes:
        path: Location of the status file.
    """

    def __init__(self, path: Path) -> None:
        """Initialize StatusRecord.

        Args:
            path: Status file location.
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Path to the status file."""
        return self._path

    def record(self, message: str) -> StatusEntry:
        """Append a timestamped message to the status file.

        Errors while writing are reported as warnings and do **not**
        interrupt the installer.

        Args:
            message: Milestone description.

        Returns:
            The entry that was (or would have been) written.
        """
        entry = create_status_entry(message)
        line = entry.to_line() + "\n"
        logger.info("Status: %s", message)

        try:
            self._append(line)
        except PermissionError:
            self._append_privileged(line)
        except OSError as e:
            print_warning(f"Could not update status file {self._path}: {e}")

        return entry

    def entries(self) -> list[StatusEntry]:
        """Read all entries, oldest first.

        Returns:
            List of StatusEntry. Empty if the file doesn't exist.
        """
        if not self._path.exists():
            return []

        entries: list[StatusEntry] = []
        with self._path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    entries.append(StatusEntry.from_line(line))
                except ValueError as e:
                    logger.warning("Skipping malformed status line %d: %s", line_num, e)

        return entries

    def _append(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open(mode="a", encoding="utf-8") as f:
            f.write(line)
            f.flush()

    def _append_privileged(self, line: str) -> None:
        """Append through sudo when the file is not writable by this user."""
        try:
            mkdir = run_command(["sudo", "mkdir", "-p", str(self._path.parent)])
            if not mkdir.success:
                print_warning(f"Could not create {self._path.parent}: {mkdir.stderr.strip()}")
                return
            tee = run_command(["sudo", "tee", "-a", str(self._path)], input_text=line)
        except (FileNotFoundError, OSError) as e:
            print_warning(f"Could not update status file {self._path}: {e}")
            return

        if not tee.success:
            print_warning(f"Could not update status file {self._path}: {tee.stderr.strip()}")
