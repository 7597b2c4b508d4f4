"""Confirmation prompts."""

import logging

import typer

logger = logging.getLogger(__name__)


class Prompter:
    """Asks yes/no questions, or answers them itself in unattended mode.

    In unattended mode (``--yes``) every question is answered with yes and
    nothing is read from the terminal.
    """

    def __init__(self, unattended: bool = False) -> None:
        self._unattended = unattended

    @property
    def unattended(self) -> bool:
        return self._unattended

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question.

        Args:
            message: Question to display.
            default: Answer used when the user just presses Enter.

        Returns:
            True for yes, False for no.

        Raises:
            typer.Abort: If the user pressed Ctrl-C or closed stdin.
        """
        if self._unattended:
            logger.debug("Unattended: answering yes to %r", message)
            return True
        return typer.confirm(message, default=default)
