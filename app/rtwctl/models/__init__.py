"""Data models for rtwctl.

This module exports the core data structures used throughout the application.
"""

from rtwctl.models.options import RunOptions
from rtwctl.models.status import StatusEntry, create_status_entry
from rtwctl.models.step import StepOutcome, StepResult
from rtwctl.models.target import InstallationTarget

__all__ = [
    "InstallationTarget",
    "RunOptions",
    "StatusEntry",
    "StepOutcome",
    "StepResult",
    "create_status_entry",
]
