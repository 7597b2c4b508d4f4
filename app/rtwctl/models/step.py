"""Step result models.

Every installer step reports a StepResult; the pipeline decides whether to
continue based on its outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StepOutcome(Enum):
    """Outcome of a single installer step.

    Attributes:
        OK: Step completed.
        SKIPPED: Nothing to do (already satisfied or not applicable).
        WARNING: Step completed with non-critical problems.
        DECLINED: The run ends early with exit code 0 (the user declined a
            confirmation, or a reboot was started).
        FATAL: Step failed; the run ends with a non-zero exit code.
    """

    OK = "ok"
    SKIPPED = "skipped"
    WARNING = "warning"
    DECLINED = "declined"
    FATAL = "fatal"

    @property
    def stops_pipeline(self) -> bool:
        """Check if this outcome ends the run."""
        return self in (StepOutcome.DECLINED, StepOutcome.FATAL)


@dataclass(frozen=True, slots=True)
class StepResult:
    """Result of running one installer step.

    Attributes:
        step_id: Identifier of the step that produced this result.
        outcome: What happened.
        message: Short summary for the user.
        warnings: Non-critical problems encountered along the way.
    """

    step_id: str
    outcome: StepOutcome
    message: str = ""
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def failed(self) -> bool:
        """Check if the step failed fatally."""
        return self.outcome == StepOutcome.FATAL

    @classmethod
    def ok(cls, step_id: str, message: str = "", warnings: list[str] | None = None) -> StepResult:
        """Create a success result, downgraded to WARNING if warnings were collected."""
        collected = tuple(warnings or ())
        outcome = StepOutcome.WARNING if collected else StepOutcome.OK
        return cls(step_id=step_id, outcome=outcome, message=message, warnings=collected)

    @classmethod
    def skipped(cls, step_id: str, message: str = "") -> StepResult:
        return cls(step_id=step_id, outcome=StepOutcome.SKIPPED, message=message)

    @classmethod
    def declined(cls, step_id: str, message: str = "") -> StepResult:
        return cls(step_id=step_id, outcome=StepOutcome.DECLINED, message=message)

    @classmethod
    def fatal(cls, step_id: str, message: str) -> StepResult:
        return cls(step_id=step_id, outcome=StepOutcome.FATAL, message=message)
