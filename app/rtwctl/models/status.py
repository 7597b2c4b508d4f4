"""Status record entry model.

Each installer milestone is written as one line of the form
``<YYYY-MM-DD HH:MM:SS> - <message>``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SEPARATOR = " - "


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """Single line of the status record.

    Attributes:
        timestamp: Local time the milestone was reached.
        message: Human-readable milestone description.
    """

    timestamp: datetime
    message: str

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.message:
            msg = "Status message cannot be empty"
            raise ValueError(msg)
        if "\n" in self.message:
            msg = "Status message must be a single line"
            raise ValueError(msg)

    def to_line(self) -> str:
        """Serialize to a status line (no trailing newline)."""
        return f"{self.timestamp.strftime(TIMESTAMP_FORMAT)}{SEPARATOR}{self.message}"

    @classmethod
    def from_line(cls, line: str) -> StatusEntry:
        """Parse a status line.

        Args:
            line: Line from the status file, with or without trailing newline.

        Returns:
            StatusEntry instance.

        Raises:
            ValueError: If the line is not in status record format.
        """
        stamp, sep, message = line.rstrip("\n").partition(SEPARATOR)
        if not sep:
            msg = f"Not a status line: {line!r}"
            raise ValueError(msg)
        return cls(timestamp=datetime.strptime(stamp, TIMESTAMP_FORMAT), message=message)


def create_status_entry(message: str) -> StatusEntry:
    """Create a status entry stamped with the current local time.

    Sub-second precision is dropped to match the on-disk format.
    """
    return StatusEntry(timestamp=datetime.now().replace(microsecond=0), message=message)
