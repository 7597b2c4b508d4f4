"""Installer exception hierarchy.

Any InstallerError raised by a step is fatal: the pipeline turns it into a
FATAL step result and the CLI exits with status 1.
"""


class InstallerError(Exception):
    """Base exception for fatal installer errors."""


class PrivilegeError(InstallerError):
    """Raised when run as root or sudo credentials cannot be obtained."""


class PackageManagerNotFoundError(InstallerError):
    """Raised when no supported package manager is available."""


class HeadersError(InstallerError):
    """Raised when kernel headers cannot be installed by any method."""


class PackageInstallError(InstallerError):
    """Raised when required packages or system updates fail to install."""


class RebootRequiredError(InstallerError):
    """Raised when updates need a reboot the user postponed."""


class CloneError(InstallerError):
    """Raised when the driver repository cannot be cloned."""


class BuildError(InstallerError):
    """Raised when DKMS fails to build or install the driver."""
