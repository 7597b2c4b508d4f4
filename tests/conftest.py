"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from rtwctl.core.config import InstallerConfig
from rtwctl.core.context import InstallContext
from rtwctl.models.options import RunOptions
from rtwctl.operators.base import PackageManager
from rtwctl.utils.shell import CommandResult


class FakePackageManager(PackageManager):
    """In-memory package manager recording every call."""

    def __init__(
        self,
        installed: set[str] | None = None,
        available: set[str] | None = None,
        failing: set[str] | None = None,
        upgradable: int = 0,
        upgrade_code: int = 0,
    ) -> None:
        self.installed = set(installed or ())
        self.available = set(available or ())
        self.failing = set(failing or ())
        self.pending_upgrades = upgradable
        self.upgrade_code = upgrade_code
        self.install_calls: list[list[str]] = []
        self.refresh_calls = 0
        self.upgrade_calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def is_available(self) -> bool:
        return True

    def refresh(self) -> CommandResult:
        self.refresh_calls += 1
        return CommandResult(stdout="", stderr="", returncode=0)

    def install(self, packages: list[str]) -> CommandResult:
        self.install_calls.append(list(packages))
        if self.failing.intersection(packages):
            return CommandResult(stdout="", stderr="E: Unable to locate package", returncode=100)
        self.installed.update(packages)
        return CommandResult(stdout="", stderr="", returncode=0)

    def is_installed(self, package: str) -> bool:
        return package in self.installed

    def has_package(self, package: str) -> bool:
        return package in self.available

    def upgradable_count(self) -> int:
        return self.pending_upgrades

    def upgrade(self) -> int:
        self.upgrade_calls += 1
        return self.upgrade_code


@pytest.fixture
def mock_lsmod_output() -> str:
    """Sample lsmod output with rtw88 modules loaded."""
    return """Module                  Size  Used by
rtw_8822ce             16384  0
rtw_8822c             487424  1 rtw_8822ce
rtw_pci                40960  1 rtw_8822ce
rtw_core              311296  2 rtw_8822c,rtw_pci
mac80211             1425408  2 rtw_pci,rtw_core
cfg80211             1290240  2 mac80211,rtw_core"""


@pytest.fixture
def mock_dkms_status_output() -> str:
    """Sample dkms status output with rtw88 installed."""
    return """nvidia/535.183.01, 6.8.0-45-generic, x86_64: installed
rtw88/0.6, 6.8.0-45-generic, x86_64: installed"""


@pytest.fixture
def mock_apt_upgradable_output() -> str:
    """Sample apt list --upgradable output with two pending upgrades."""
    return """Listing...
curl/noble-updates 8.5.0-2ubuntu10.4 amd64 [upgradable from: 8.5.0-2ubuntu10.3]
openssl/noble-updates 3.0.13-0ubuntu3.4 amd64 [upgradable from: 3.0.13-0ubuntu3.3]"""


@pytest.fixture
def mock_dpkg_installed_output() -> str:
    """Sample dpkg -l output for an installed package."""
    return """Desired=Unknown/Install/Remove/Purge/Hold
| Status=Not/Inst/Conf-files/Unpacked/halF-conf/Half-inst/trig-aWait/Trig-pend
|/ Err?=(none)/Reinst-required (Status,Err: uppercase=bad)
||/ Name           Version      Architecture Description
+++-==============-============-============-=================================
ii  dkms           3.0.11-1ubuntu13 all      Dynamic Kernel Module System (DKMS)"""


@pytest.fixture
def installer_config(tmp_path: Path) -> InstallerConfig:
    """Installer config with every writable location under tmp_path."""
    modprobe_dir = tmp_path / "modprobe.d"
    modprobe_dir.mkdir()
    return InstallerConfig(
        status_file=tmp_path / "state" / "status.flag",
        modprobe_dir=modprobe_dir,
    )


@pytest.fixture
def fake_manager() -> FakePackageManager:
    """Package manager with nothing installed."""
    return FakePackageManager()


@pytest.fixture
def make_context(installer_config: InstallerConfig, fake_manager: FakePackageManager, tmp_path: Path):
    """Factory building an InstallContext rooted in tmp_path."""

    def _make(unattended: bool = True, uninstall: bool = False) -> InstallContext:
        workdir = tmp_path / "work"
        workdir.mkdir(exist_ok=True)
        ctx = InstallContext.create(
            installer_config,
            RunOptions(unattended=unattended, uninstall=uninstall),
            workdir=workdir,
        )
        ctx._package_manager = fake_manager
        return ctx

    return _make
