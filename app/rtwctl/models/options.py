"""Command-line run options."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Options parsed once from the command line.

    Attributes:
        unattended: Answer every confirmation prompt with yes.
        uninstall: Remove the driver instead of installing it.
    """

    unattended: bool = False
    uninstall: bool = False
