"""Installation target model.

Identifies the driver package the installer manages inside DKMS.
"""

from dataclasses import dataclass
from pathlib import Path

from rtwctl.core.paths import DKMS_SOURCE_ROOT


@dataclass(frozen=True, slots=True)
class InstallationTarget:
    """A DKMS module identified by name and version.

    Attributes:
        name: DKMS module name (e.g., 'rtw88').
        version: DKMS module version (e.g., '0.6').
    """

    name: str
    version: str

    def __post_init__(self) -> None:
        """Validate target data after initialization."""
        if not self.name:
            msg = "Module name cannot be empty"
            raise ValueError(msg)
        if not self.version:
            msg = "Module version cannot be empty"
            raise ValueError(msg)

    @property
    def dkms_ref(self) -> str:
        """Module reference in the form DKMS expects (``name/version``)."""
        return f"{self.name}/{self.version}"

    @property
    def source_dir(self) -> Path:
        """Directory DKMS copies the module sources into."""
        return DKMS_SOURCE_ROOT / f"{self.name}-{self.version}"

    def __str__(self) -> str:
        return self.dkms_ref
