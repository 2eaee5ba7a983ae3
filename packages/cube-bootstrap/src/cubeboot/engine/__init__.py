from .context import SequenceContext
from .report import RunReport, RunState, StepRecord
from .sequencer import Sequencer
from .step import Plan, Step, StepOutcome, StepStatus

__all__ = [
    "Plan",
    "RunReport",
    "RunState",
    "SequenceContext",
    "Sequencer",
    "Step",
    "StepOutcome",
    "StepRecord",
    "StepStatus",
]
