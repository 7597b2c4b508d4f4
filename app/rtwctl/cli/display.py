"""Shared Rich display functions for the installer CLI.

Provides the startup banner and the step summary printed at the end of a
verbose run.
"""

from rich.panel import Panel
from rich.table import Table

from rtwctl.core.pipeline import PipelineResult
from rtwctl.models.step import StepOutcome, StepResult
from rtwctl.utils.formatting import console, print_success, print_warning

_OUTCOME_STYLES: dict[StepOutcome, str] = {
    StepOutcome.OK: "[success]OK[/success]",
    StepOutcome.SKIPPED: "[muted]SKIP[/muted]",
    StepOutcome.WARNING: "[warning]WARN[/warning]",
    StepOutcome.DECLINED: "[info]STOP[/info]",
    StepOutcome.FATAL: "[error]FAIL[/error]",
}


def print_banner(module_name: str) -> None:
    """Print the installer banner.

    Args:
        module_name: Driver module name shown in the title.
    """
    title = f"{module_name.upper()} WiFi 5 Driver Installation"
    console.print(
        Panel.fit(
            f"[banner]{title}[/banner]\n[muted]DKMS Installation[/muted]",
            border_style="banner",
            padding=(0, 6),
        )
    )


def create_results_table(results: list[StepResult]) -> Table:
    """Create a Rich table displaying step results.

    Args:
        results: Step results in execution order.

    Returns:
        Rich Table with Status, Step, and Message columns.
    """
    table = Table(
        title="Steps",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Step", no_wrap=True)
    table.add_column("Message")

    for result in results:
        message = result.message
        if result.warnings:
            message = "; ".join([message, *result.warnings]) if message else "; ".join(result.warnings)
        table.add_row(
            _OUTCOME_STYLES[result.outcome],
            result.step_id,
            f"[muted]{message}[/muted]",
        )

    return table


def print_results_summary(result: PipelineResult) -> None:
    """Print a short summary of the run.

    Nothing is printed after a fatal step, since the error was already shown.

    Args:
        result: Outcome of the step pipeline.
    """
    if result.failed:
        return
    step_count = len(result.results)
    if result.declined:
        print_warning(f"Stopped after {result.ran_steps[-1]}: {result.results[-1].message}")
    elif not result.warnings:
        print_success(f"All {step_count} step(s) completed without warnings.")
    if result.warnings:
        print_warning(f"{len(result.warnings)} non-critical issue(s) during {step_count} step(s).")
