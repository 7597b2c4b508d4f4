"""CLI package for rtwctl.

This package contains the Typer application.
"""

from rtwctl.cli.main import app, run

__all__ = ["app", "run"]
