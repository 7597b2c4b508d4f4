"""Package managers for installing build dependencies.

This module provides the abstract PackageManager interface, its concrete
implementations, and detection of the one to use on this host.
"""

from rtwctl.core.errors import PackageManagerNotFoundError
from rtwctl.operators.apt import AptPackageManager
from rtwctl.operators.base import PackageManager

# Checked in order; the first available one wins
SUPPORTED_MANAGERS: tuple[type[PackageManager], ...] = (AptPackageManager,)


def detect_package_manager() -> PackageManager:
    """Return the first supported package manager available on this host.

    Raises:
        PackageManagerNotFoundError: If none is available.
    """
    for manager_cls in SUPPORTED_MANAGERS:
        manager = manager_cls()
        if manager.is_available():
            return manager

    names = ", ".join(cls().name for cls in SUPPORTED_MANAGERS)
    msg = f"No supported package manager found (supported: {names})"
    raise PackageManagerNotFoundError(msg)


__all__ = [
    "AptPackageManager",
    "PackageManager",
    "SUPPORTED_MANAGERS",
    "detect_package_manager",
]
