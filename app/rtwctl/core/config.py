"""Installer configuration.

The defaults reproduce the rtw88 driver package. Every field can be
overridden from a TOML file, by default ``~/.config/rtwctl/config.toml``::

    repo_url = "https://github.com/lwfinger/rtw88.git"
    module_version = "0.6"
    required_packages = ["dkms", "git", "build-essential"]
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rtwctl.core.paths import DEFAULT_STATUS_FILE, MODPROBE_DIR, get_config_path
from rtwctl.models.target import InstallationTarget

logger = logging.getLogger(__name__)


class InstallerConfig(BaseModel):
    """Shared constants for every installer step.

    Attributes:
        repo_url: Git URL of the driver source repository.
        repo_dir: Checkout directory, relative to the working directory.
        module_name: DKMS module name.
        module_version: DKMS module version.
        module_prefix: Prefix of the kernel modules the driver loads (lsmod names).
        config_file: Modprobe config file shipped in the repository root.
        modprobe_dir: Directory the config file is installed into.
        status_file: Append-only status record location.
        required_packages: Packages needed to build the driver.
        keepalive_interval: Seconds between sudo credential refreshes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    repo_url: Annotated[str, Field(min_length=1)] = "https://github.com/lwfinger/rtw88.git"
    repo_dir: Annotated[str, Field(min_length=1)] = "rtw88"
    module_name: Annotated[str, Field(min_length=1)] = "rtw88"
    module_version: Annotated[str, Field(min_length=1)] = "0.6"
    module_prefix: Annotated[str, Field(min_length=1)] = "rtw_"
    config_file: Annotated[str, Field(min_length=1)] = "rtw88.conf"
    modprobe_dir: Path = MODPROBE_DIR
    status_file: Path = DEFAULT_STATUS_FILE
    required_packages: list[str] = Field(
        default_factory=lambda: ["dkms", "git", "build-essential"],
        min_length=1,
    )
    keepalive_interval: Annotated[int, Field(ge=5, le=300)] = 50

    @property
    def target(self) -> InstallationTarget:
        """DKMS target this configuration installs."""
        return InstallationTarget(name=self.module_name, version=self.module_version)

    @property
    def installed_config_path(self) -> Path:
        """Where the modprobe config file ends up."""
        return self.modprobe_dir / self.config_file

    def checkout_path(self, base: Path | None = None) -> Path:
        """Resolve the repository checkout directory.

        Args:
            base: Directory the checkout is relative to. Defaults to the
                current working directory.
        """
        return (base or Path.cwd()) / self.repo_dir


class ConfigError(Exception):
    """Base exception for installer configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file does not exist."""


class ConfigParseError(ConfigError):
    """Raised when the config file is not valid TOML."""


def load_config(path: Path | None = None) -> InstallerConfig:
    """Load installer configuration.

    Without an explicit path the default location is used, and a missing
    file simply yields the built-in defaults.

    Args:
        path: Explicit config file path (``--config``).

    Returns:
        Validated InstallerConfig.

    Raises:
        ConfigNotFoundError: If an explicit path does not exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        if path is not None:
            raise ConfigNotFoundError(f"Config file not found: {config_path}")
        logger.debug("No config at %s, using defaults", config_path)
        return InstallerConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        config = InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e

    logger.info("Loaded installer config from %s", config_path)
    return config
