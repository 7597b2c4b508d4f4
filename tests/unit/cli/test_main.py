"""Unit tests for the CLI entry point.

Tests for option parsing, exit codes, and the console script wrapper.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import typer
from rtwctl import __version__
from rtwctl.cli.main import EXIT_INTERRUPTED, app, run
from rtwctl.core.config import InstallerConfig
from rtwctl.core.pipeline import PipelineResult
from rtwctl.models.step import StepResult
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def config(tmp_path: Path) -> InstallerConfig:
    return InstallerConfig(status_file=tmp_path / "status.flag")


def _step_ids(mock_pipeline: MagicMock) -> list[str]:
    steps = mock_pipeline.call_args.args[0]
    return [step.step_id for step in steps]


class TestHelpAndVersion:
    """Tests for informational options."""

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, flag: str) -> None:
        result = runner.invoke(app, [flag])

        assert result.exit_code == 0
        assert "--yes" in result.stdout
        assert "--uninstall" in result.stdout

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"rtwctl version {__version__}" in result.stdout


class TestMainCommand:
    """Tests for the installer command."""

    @patch("rtwctl.cli.main.run_pipeline")
    def test_install_flow_selected(
        self, mock_pipeline: MagicMock, config: InstallerConfig
    ) -> None:
        mock_pipeline.return_value = PipelineResult(results=(StepResult.ok("reboot"),))

        with patch("rtwctl.cli.main.load_config", return_value=config):
            result = runner.invoke(app, ["-y"])

        assert result.exit_code == 0
        assert "clone_source" in _step_ids(mock_pipeline)
        ctx = mock_pipeline.call_args.args[1]
        assert ctx.options.unattended is True
        assert ctx.prompter.unattended is True

    @patch("rtwctl.cli.main.run_pipeline")
    def test_uninstall_flow_selected(
        self, mock_pipeline: MagicMock, config: InstallerConfig
    ) -> None:
        mock_pipeline.return_value = PipelineResult(results=())

        with patch("rtwctl.cli.main.load_config", return_value=config):
            result = runner.invoke(app, ["-u", "-y"])

        assert result.exit_code == 0
        ids = _step_ids(mock_pipeline)
        assert "remove_driver" in ids
        assert "clone_source" not in ids

    @patch("rtwctl.cli.main.run_pipeline")
    def test_fatal_step_exits_1(self, mock_pipeline: MagicMock, config: InstallerConfig) -> None:
        mock_pipeline.return_value = PipelineResult(
            results=(StepResult.fatal("check_root", "should NOT be run as root"),)
        )

        with patch("rtwctl.cli.main.load_config", return_value=config):
            result = runner.invoke(app, [])

        assert result.exit_code == 1

    @patch("rtwctl.cli.main.run_pipeline")
    def test_declined_exits_0(self, mock_pipeline: MagicMock, config: InstallerConfig) -> None:
        mock_pipeline.return_value = PipelineResult(
            results=(StepResult.declined("confirm_install", "Installation cancelled"),)
        )

        with patch("rtwctl.cli.main.load_config", return_value=config):
            result = runner.invoke(app, [])

        assert result.exit_code == 0

    @patch("rtwctl.cli.main.run_pipeline", side_effect=KeyboardInterrupt)
    def test_interrupt_exits_130(self, _pipeline: MagicMock, config: InstallerConfig) -> None:
        with (
            patch("rtwctl.cli.main.load_config", return_value=config),
            patch("rtwctl.core.context.InstallContext.shutdown") as mock_shutdown,
        ):
            result = runner.invoke(app, ["-y"])

        assert result.exit_code == EXIT_INTERRUPTED
        mock_shutdown.assert_called_once()

    @patch("rtwctl.cli.main.run_pipeline", side_effect=typer.Abort)
    def test_aborted_prompt_exits_130(self, _pipeline: MagicMock, config: InstallerConfig) -> None:
        """An interrupted confirmation prompt counts as Ctrl-C."""
        with (
            patch("rtwctl.cli.main.load_config", return_value=config),
            patch("rtwctl.core.context.InstallContext.shutdown") as mock_shutdown,
        ):
            result = runner.invoke(app, [])

        assert result.exit_code == EXIT_INTERRUPTED
        mock_shutdown.assert_called_once()

    def test_missing_config_exits_1(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.toml")])

        assert result.exit_code == 1

    def test_invalid_config_exits_1(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("unknown_key = 1\n")

        result = runner.invoke(app, ["-c", str(path)])

        assert result.exit_code == 1

    @patch("rtwctl.cli.main.run_pipeline")
    def test_verbose_prints_summary(self, mock_pipeline: MagicMock, config: InstallerConfig) -> None:
        mock_pipeline.return_value = PipelineResult(results=(StepResult.ok("check_root"),))

        with (
            patch("rtwctl.cli.main.load_config", return_value=config),
            patch("rtwctl.cli.main.create_results_table") as mock_table,
            patch("rtwctl.cli.main.print_results_summary") as mock_summary,
        ):
            result = runner.invoke(app, ["-v", "-y"])

        assert result.exit_code == 0
        mock_table.assert_called_once()
        mock_summary.assert_called_once_with(mock_pipeline.return_value)


class TestRunEntryPoint:
    """Tests for the console script wrapper."""

    def test_unknown_option_exits_1(self) -> None:
        """Usage errors exit with 1 rather than the usual 2."""
        with (
            patch.object(sys, "argv", ["rtwctl", "--bogus"]),
            pytest.raises(SystemExit) as exc_info,
        ):
            run()

        assert exc_info.value.code == 1

    def test_success_exits_0(self, config: InstallerConfig) -> None:
        with (
            patch.object(sys, "argv", ["rtwctl", "-y"]),
            patch("rtwctl.cli.main.load_config", return_value=config),
            patch("rtwctl.cli.main.run_pipeline", return_value=PipelineResult(results=())),
            pytest.raises(SystemExit) as exc_info,
        ):
            run()

        assert exc_info.value.code == 0

    def test_fatal_exit_code_propagates(self, config: InstallerConfig) -> None:
        failed = PipelineResult(results=(StepResult.fatal("clone_source", "boom"),))

        with (
            patch.object(sys, "argv", ["rtwctl"]),
            patch("rtwctl.cli.main.load_config", return_value=config),
            patch("rtwctl.cli.main.run_pipeline", return_value=failed),
            pytest.raises(SystemExit) as exc_info,
        ):
            run()

        assert exc_info.value.code == 1

    def test_missing_option_value_exits_1(self) -> None:
        with (
            patch.object(sys, "argv", ["rtwctl", "--config"]),
            pytest.raises(SystemExit) as exc_info,
        ):
            run()

        assert exc_info.value.code == 1

    def test_ctrl_c_at_confirmation_exits_130(self, config: InstallerConfig) -> None:
        """Ctrl-C while the install confirmation waits for input exits 130."""
        termui = sys.modules[typer.confirm.__module__]

        with (
            patch.object(sys, "argv", ["rtwctl"]),
            patch("rtwctl.cli.main.load_config", return_value=config),
            patch("rtwctl.system.host.is_root", return_value=False),
            patch("rtwctl.system.sudo.has_cached_credentials", return_value=True),
            patch("rtwctl.system.sudo.SudoKeepAlive"),
            patch("rtwctl.system.secureboot.is_secure_boot_enabled", return_value=False),
            patch.object(termui, "visible_prompt_func", side_effect=KeyboardInterrupt),
            patch("rtwctl.core.context.InstallContext.shutdown") as mock_shutdown,
            pytest.raises(SystemExit) as exc_info,
        ):
            run()

        assert exc_info.value.code == EXIT_INTERRUPTED
        mock_shutdown.assert_called_once()
