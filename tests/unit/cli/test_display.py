"""Unit tests for cli/display.py.

Tests for the banner and the verbose step summary.
"""

import io

import pytest
from rich.console import Console
from rtwctl.cli.display import (
    create_results_table,
    print_banner,
    print_results_summary,
)
from rtwctl.core.pipeline import PipelineResult
from rtwctl.core.theme import get_theme
from rtwctl.models.step import StepResult


def _capture_console_output(func: object, *args: object, **kwargs: object) -> str:
    """Capture Rich console output by temporarily replacing the consoles.

    Patches the module-level consoles used by display functions and captures
    output to a StringIO buffer.
    """
    import rtwctl.cli.display as display_mod
    import rtwctl.utils.formatting as fmt_mod

    buf = io.StringIO()
    test_console = Console(theme=get_theme(), file=buf, color_system=None, width=100)

    originals = (display_mod.console, fmt_mod.console, fmt_mod.err_console)
    display_mod.console = test_console
    fmt_mod.console = test_console
    fmt_mod.err_console = test_console
    try:
        func(*args, **kwargs)  # type: ignore[operator]
    finally:
        display_mod.console, fmt_mod.console, fmt_mod.err_console = originals

    return buf.getvalue()


def _render(table: object) -> str:
    buf = io.StringIO()
    Console(theme=get_theme(), file=buf, color_system=None, width=120).print(table)
    return buf.getvalue()


@pytest.fixture
def mixed_results() -> list[StepResult]:
    """Results of a run that finished with a warning."""
    return [
        StepResult.ok("check_root"),
        StepResult.skipped("kernel_headers", "Kernel headers already installed"),
        StepResult.ok("verify", "Verification finished", ["Configuration file not found"]),
    ]


class TestPrintBanner:
    """Tests for print_banner."""

    def test_banner_title(self) -> None:
        output = _capture_console_output(print_banner, "rtw88")

        assert "RTW88 WiFi 5 Driver Installation" in output
        assert "DKMS Installation" in output


class TestCreateResultsTable:
    """Tests for create_results_table."""

    def test_columns(self, mixed_results: list[StepResult]) -> None:
        table = create_results_table(mixed_results)

        assert [col.header for col in table.columns] == ["Status", "Step", "Message"]
        assert table.row_count == 3

    def test_rows_show_outcome_and_warnings(self, mixed_results: list[StepResult]) -> None:
        output = _render(create_results_table(mixed_results))

        assert "SKIP" in output
        assert "WARN" in output
        assert "Configuration file not found" in output

    def test_fatal_row(self) -> None:
        output = _render(create_results_table([StepResult.fatal("build_driver", "DKMS failed")]))

        assert "FAIL" in output
        assert "build_driver" in output


class TestPrintResultsSummary:
    """Tests for print_results_summary."""

    def test_clean_run(self) -> None:
        result = PipelineResult(results=(StepResult.ok("a"),))

        output = _capture_console_output(print_results_summary, result)

        assert "All 1 step(s) completed without warnings." in output

    def test_counts_warnings(self, mixed_results: list[StepResult]) -> None:
        output = _capture_console_output(
            print_results_summary, PipelineResult(results=tuple(mixed_results))
        )

        assert "1 non-critical issue(s) during 3 step(s)." in output

    def test_declined_run_names_stopping_step(self) -> None:
        result = PipelineResult(
            results=(
                StepResult.ok("check_root"),
                StepResult.declined("confirm_install", "Installation cancelled"),
            )
        )

        output = _capture_console_output(print_results_summary, result)

        assert "Stopped after confirm_install: Installation cancelled" in output
        assert "completed without warnings" not in output

    def test_silent_after_failure(self) -> None:
        result = PipelineResult(results=(StepResult.fatal("clone_source", "boom"),))

        output = _capture_console_output(print_results_summary, result)

        assert output == ""
