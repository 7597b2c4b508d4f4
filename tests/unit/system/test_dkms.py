"""Unit tests for the DKMS wrapper."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from rtwctl.models.target import InstallationTarget
from rtwctl.system.dkms import Dkms
from rtwctl.utils.shell import CommandResult

TARGET = InstallationTarget(name="rtw88", version="0.6")


class TestDkms:
    """Tests for Dkms class."""

    @pytest.fixture
    def dkms(self) -> Dkms:
        return Dkms()

    @patch("rtwctl.system.dkms.run_command")
    def test_status_lines_filters_module(
        self, mock_run: MagicMock, dkms: Dkms, mock_dkms_status_output: str
    ) -> None:
        mock_run.return_value = CommandResult(stdout=mock_dkms_status_output, stderr="", returncode=0)

        assert dkms.status_lines(TARGET) == ["rtw88/0.6, 6.8.0-45-generic, x86_64: installed"]

    @patch("rtwctl.system.dkms.run_command", side_effect=FileNotFoundError("dkms"))
    def test_status_without_dkms(self, _run: MagicMock, dkms: Dkms) -> None:
        """A missing dkms binary means nothing is registered."""
        assert dkms.status_lines(TARGET) == []
        assert dkms.is_registered(TARGET) is False

    @patch("rtwctl.system.dkms.run_command")
    def test_status_failure(self, mock_run: MagicMock, dkms: Dkms) -> None:
        mock_run.return_value = CommandResult(stdout="", stderr="boom", returncode=1)

        assert dkms.status_lines(TARGET) == []

    @patch("rtwctl.system.dkms.run_command")
    def test_is_installed(self, mock_run: MagicMock, dkms: Dkms) -> None:
        mock_run.return_value = CommandResult(
            stdout="rtw88/0.6, 6.8.0-45-generic, x86_64: installed\n", stderr="", returncode=0
        )

        assert dkms.is_installed(TARGET) is True

    @patch("rtwctl.system.dkms.run_command")
    def test_added_only_is_registered_not_installed(self, mock_run: MagicMock, dkms: Dkms) -> None:
        mock_run.return_value = CommandResult(stdout="rtw88/0.6: added\n", stderr="", returncode=0)

        assert dkms.is_registered(TARGET) is True
        assert dkms.is_installed(TARGET) is False

    @patch("rtwctl.system.dkms.run_command")
    def test_remove(self, mock_run: MagicMock, dkms: Dkms) -> None:
        mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)

        assert dkms.remove(TARGET).success
        assert mock_run.call_args.args[0] == ["sudo", "dkms", "remove", "rtw88/0.6", "--all"]

    @patch("rtwctl.system.dkms.run_interactive", return_value=0)
    def test_install(self, mock_run: MagicMock, dkms: Dkms) -> None:
        assert dkms.install(Path("/home/user/rtw88")) == 0
        mock_run.assert_called_once_with(["sudo", "dkms", "install", "/home/user/rtw88"])

    def test_is_available(self, dkms: Dkms) -> None:
        with patch("rtwctl.system.dkms.command_exists", return_value=False):
            assert dkms.is_available() is False
