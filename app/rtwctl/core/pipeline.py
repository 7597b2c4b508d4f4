"""Fixed-order step runner.

Runs installer steps in sequence, records status milestones, and stops at
the first fatal or declined outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rtwctl.core.errors import InstallerError
from rtwctl.core.steps import (
    AcquireSudoStep,
    BuildDriverStep,
    CheckNotRootStep,
    CloneSourceStep,
    ConfirmInstallStep,
    ConfirmUninstallStep,
    DetectExistingStep,
    InstallerStep,
    KeepSourceStep,
    KernelHeadersStep,
    RebootStep,
    RemoveDriverStep,
    ReportStep,
    RequiredPackagesStep,
    SecureBootStep,
    SystemUpdatesStep,
    VerifyStep,
)
from rtwctl.models.step import StepOutcome, StepResult
from rtwctl.utils.formatting import print_error

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rtwctl.core.context import InstallContext
    from rtwctl.models.options import RunOptions

logger = logging.getLogger(__name__)


def preflight_steps() -> list[InstallerStep]:
    """Steps every run starts with."""
    return [CheckNotRootStep(), AcquireSudoStep()]


def uninstall_steps() -> list[InstallerStep]:
    return [ConfirmUninstallStep(), RemoveDriverStep()]


def install_steps() -> list[InstallerStep]:
    return [
        SecureBootStep(),
        ConfirmInstallStep(),
        DetectExistingStep(),
        KernelHeadersStep(),
        SystemUpdatesStep(),
        RequiredPackagesStep(),
        CloneSourceStep(),
        BuildDriverStep(),
        VerifyStep(),
        KeepSourceStep(),
        ReportStep(),
        RebootStep(),
    ]


def build_steps(options: RunOptions) -> list[InstallerStep]:
    """Assemble the full step list for a run.

    Args:
        options: Parsed command-line options.

    Returns:
        Preflight steps followed by either the uninstall or the install flow.
    """
    flow = uninstall_steps() if options.uninstall else install_steps()
    return [*preflight_steps(), *flow]


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Results of every step that ran, in order."""

    results: tuple[StepResult, ...]

    @property
    def ran_steps(self) -> list[str]:
        return [r.step_id for r in self.results]

    @property
    def failed(self) -> bool:
        """Check if the run ended on a fatal step."""
        return any(r.failed for r in self.results)

    @property
    def declined(self) -> bool:
        """Check if the run ended early without an error."""
        return bool(self.results) and self.results[-1].outcome == StepOutcome.DECLINED

    @property
    def warnings(self) -> list[str]:
        return [w for r in self.results for w in r.warnings]

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


def run_pipeline(steps: Sequence[InstallerStep], ctx: InstallContext) -> PipelineResult:
    """Run steps in order until one is fatal or declined.

    Args:
        steps: Steps to run.
        ctx: Shared run state.

    Returns:
        PipelineResult with one entry per step that ran.
    """
    results: list[StepResult] = []

    for step in steps:
        logger.info("Running step %s", step.step_id)
        if step.start_status:
            ctx.status.record(step.start_status)

        try:
            result = step.run(ctx)
        except InstallerError as e:
            result = StepResult.fatal(step.step_id, str(e))

        results.append(result)
        logger.info("Step %s finished: %s", step.step_id, result.outcome.value)
        for warning in result.warnings:
            logger.warning("%s: %s", step.step_id, warning)

        if result.failed:
            logger.error("Step %s failed: %s", step.step_id, result.message)
            if step.failure_status:
                ctx.status.record(step.failure_status)
            print_error(result.message)
            break

        if result.outcome.stops_pipeline:
            logger.info("Stopping after %s: %s", step.step_id, result.message)
            break

    return PipelineResult(results=tuple(results))
