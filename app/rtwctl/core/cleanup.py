"""Deferred removal of the driver checkout.

Registered when a run starts and evaluated exactly once when it ends,
whether the run succeeded, failed, or was interrupted.
"""

import logging
import shutil
from pathlib import Path

from rtwctl.utils.formatting import print_info, print_warning

logger = logging.getLogger(__name__)


class CheckoutCleanup:
    """Removes the repository checkout at shutdown unless asked to keep it.

    Only a checkout cloned by the current run is ever removed, so an
    existing tree the user chose to reuse survives.

    Attributes:
        checkout: Path of the repository checkout.
        keep_checkout: Set when the user wants the sources kept.
    """

    def __init__(self, checkout: Path) -> None:
        self.checkout = checkout
        self.keep_checkout = False
        self._cloned = False
        self._done = False

    @property
    def cloned(self) -> bool:
        """Whether this run created the checkout."""
        return self._cloned

    def mark_cloned(self) -> None:
        """Record that the checkout was created by this run."""
        self._cloned = True

    def run(self) -> bool:
        """Remove the checkout if this run owns it and it was not kept.

        Subsequent calls do nothing.

        Returns:
            True if the checkout was removed.
        """
        if self._done:
            return False
        self._done = True

        if self.keep_checkout or not self._cloned or not self.checkout.is_dir():
            return False

        print_info("Cleaning up repository...")
        try:
            shutil.rmtree(self.checkout)
        except OSError as e:
            print_warning(f"Could not remove {self.checkout}: {e}")
            return False

        logger.info("Removed checkout %s", self.checkout)
        return True
