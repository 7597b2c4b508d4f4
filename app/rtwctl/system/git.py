"""Git source checkout."""

import logging
from pathlib import Path

from rtwctl.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)

# Cloning over a slow link can take a while
_CLONE_TIMEOUT: float = 600.0


def clone(url: str, dest: Path) -> CommandResult:
    """Clone a repository.

    Args:
        url: Repository URL.
        dest: Target directory; must not exist.

    Returns:
        CommandResult of ``git clone``.

    Raises:
        FileNotFoundError: If git is not installed.
        subprocess.TimeoutExpired: If the clone takes too long.
    """
    logger.info("Cloning %s into %s", url, dest)
    return run_command(["git", "clone", url, str(dest)], timeout=_CLONE_TIMEOUT)
