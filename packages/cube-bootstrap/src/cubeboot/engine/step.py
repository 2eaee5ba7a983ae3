from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..polling import PollPolicy

if TYPE_CHECKING:
    from .context import SequenceContext


class StepStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    WARNED = "warned"
    FAILED = "failed"


@dataclass(frozen=True)
class StepOutcome:
    status: StepStatus
    message: str = ""
    duration_ms: int = 0

    @classmethod
    def applied(cls, message: str = "") -> "StepOutcome":
        return cls(StepStatus.APPLIED, message)

    @classmethod
    def skipped(cls, message: str = "") -> "StepOutcome":
        return cls(StepStatus.SKIPPED, message)

    @classmethod
    def warned(cls, message: str) -> "StepOutcome":
        return cls(StepStatus.WARNED, message)


StepAction = Callable[["SequenceContext"], "StepOutcome | None"]
Predicate = Callable[["SequenceContext"], bool]


@dataclass(frozen=True)
class Step:
    """One unit of a plan.

    When `guard` holds the action is not invoked and the step is reported as
    skipped; `when_present` then runs instead (it may raise to abort). When
    `readiness` is set it is polled after the action or the skip, with `poll`
    or the run's default policy; exhausting the policy is fatal.
    """

    name: str
    title: str
    action: StepAction
    guard: Predicate | None = None
    guard_message: str = "already in place"
    when_present: Callable[["SequenceContext"], None] | None = None
    readiness: Predicate | None = None
    readiness_label: str = "readiness condition"
    poll: PollPolicy | None = None


@dataclass(frozen=True)
class Plan:
    name: str
    title: str
    steps: tuple[Step, ...]
    on_complete: Callable[["SequenceContext"], None] | None = None
    on_failure: Callable[["SequenceContext"], None] | None = None
