"""Sudo credential handling.

rtwctl runs as a regular user and escalates per command. Credentials are
obtained once up front and kept fresh by a background thread so long
builds never stop at a password prompt.
"""

import logging
import subprocess
import threading

from rtwctl.utils.shell import command_exists, run_command, run_interactive

logger = logging.getLogger(__name__)


def has_cached_credentials() -> bool:
    """Check if sudo works without a password right now."""
    try:
        return run_command(["sudo", "-n", "true"], timeout=10.0).success
    except (OSError, subprocess.TimeoutExpired):
        return False


def acquire_credentials() -> bool:
    """Make sure sudo credentials are cached, prompting if needed.

    Returns:
        True if sudo can be used for the rest of the run.
    """
    if not command_exists("sudo"):
        return False
    if has_cached_credentials():
        return True
    try:
        return run_interactive(["sudo", "-v"]) == 0
    except OSError:
        return False


class SudoKeepAlive:
    """Background refresher for the sudo timestamp.

    Runs ``sudo -n true`` every ``interval`` seconds on a daemon thread.
    Failures are ignored; the thread dies with the process at the latest.
    """

    def __init__(self, interval: float = 50.0) -> None:
        self._interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start refreshing. Calling start twice is a no-op."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name="sudo-keepalive",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop refreshing and wait briefly for the thread to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop.wait(self._interval):
            if not has_cached_credentials():
                logger.debug("sudo keep-alive refresh failed")
