"""Main CLI application entry point.

Defines the Typer application and its options.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from rtwctl import __version__
from rtwctl.cli.display import create_results_table, print_banner, print_results_summary
from rtwctl.core.config import ConfigError, load_config
from rtwctl.core.context import InstallContext
from rtwctl.core.pipeline import build_steps, run_pipeline
from rtwctl.models.options import RunOptions
from rtwctl.utils.formatting import console, err_console, print_error, print_warning

app = typer.Typer(
    name="rtwctl",
    help="Install the rtw88 Realtek WiFi 5 driver with DKMS.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Shell convention for termination by SIGINT
EXIT_INTERRUPTED = 130

# Exit status Typer uses for bad options and arguments
EXIT_USAGE_ERROR = 2


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rtwctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr in verbose mode, discard them otherwise.

    User-facing output goes through the Rich consoles; logging only adds
    command-level detail for troubleshooting.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if verbose:
        handler: logging.Handler = RichHandler(
            console=err_console,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.setLevel(logging.DEBUG)
    else:
        handler = logging.NullHandler()
        root.setLevel(logging.WARNING)
    root.addHandler(handler)


@app.command()
def main(
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompts (unattended install).",
        ),
    ] = False,
    uninstall: Annotated[
        bool,
        typer.Option(
            "--uninstall",
            "-u",
            help="Uninstall the driver and DKMS entries.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Installer config file (default: ~/.config/rtwctl/config.toml).",
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every command and print a step summary.",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Install the rtw88 driver via DKMS, or remove it with --uninstall.

    Run as a regular user: sudo is requested when needed.

    Examples:
        rtwctl              # Guided installation
        rtwctl --yes        # Unattended installation
        rtwctl --uninstall  # Remove driver and DKMS entries
    """
    configure_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    options = RunOptions(unattended=yes, uninstall=uninstall)
    ctx = InstallContext.create(config, options)

    print_banner(config.module_name)

    try:
        result = run_pipeline(build_steps(options), ctx)
    except (KeyboardInterrupt, typer.Abort):
        # Ctrl-C at a confirmation prompt surfaces as Abort
        console.print()
        print_warning("Interrupted")
        raise typer.Exit(code=EXIT_INTERRUPTED) from None
    finally:
        ctx.shutdown()

    if verbose:
        console.print(create_results_table(list(result.results)))
        print_results_summary(result)

    if result.exit_code != 0:
        raise typer.Exit(code=result.exit_code)


def run() -> None:
    """Console script entry point.

    Same as invoking the Typer app, except that command-line usage errors
    exit with status 1 instead of the usual 2.
    """
    try:
        app(prog_name="rtwctl")
    except SystemExit as e:
        if e.code == EXIT_USAGE_ERROR:
            sys.exit(1)
        raise


if __name__ == "__main__":
    run()
