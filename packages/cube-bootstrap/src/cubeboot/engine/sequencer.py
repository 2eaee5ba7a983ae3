from __future__ import annotations

import time

from ..errors import ConvergenceTimeoutError, ScriptError, StepCommandError
from ..logging import utc_now_iso
from ..polling import poll_until
from .context import SequenceContext
from .report import RunReport, RunState, StepRecord
from .step import Plan, Step, StepOutcome, StepStatus


class Sequencer:
    """Runs the steps of a plan in order and stops at the first fatal error.

    States move `NotStarted -> Running(i) -> Running(i+1) | Failed | Completed`.
    A `ScriptError` raised by a step is fatal, and so is an `OSError` or
    `UnicodeError` from file handling, recorded as a step command failure.
    There is no retry across steps and no rollback.
    """

    def __init__(self, sctx: SequenceContext) -> None:
        self.sctx = sctx
        self.state = RunState.NOT_STARTED
        self.current: int | None = None

    def run(self, plan: Plan) -> RunReport:
        sctx = self.sctx
        report = RunReport(plan=plan.name, run_id=sctx.ctx.run_id)
        sctx.console.header(plan.title)
        sctx.log("info", "plan-start", plan=plan.name, steps=len(plan.steps))
        total = len(plan.steps)
        for index, step in enumerate(plan.steps, start=1):
            self.state = RunState.RUNNING
            self.current = index
            report.state = RunState.RUNNING
            sctx.console.info(f"Step {index}/{total}: {step.title}...")
            started = time.monotonic()
            try:
                outcome = self._execute(step)
            except ScriptError as exc:
                duration_ms = int((time.monotonic() - started) * 1000)
                report.steps.append(StepRecord(step.name, step.title, StepOutcome(StepStatus.FAILED, exc.message, duration_ms)))
                report.error = {"step": step.name, "kind": exc.kind, "code": exc.code, "message": exc.message}
                self.state = RunState.FAILED
                sctx.console.error(exc.message)
                sctx.log("error", "step-failed", step=step.name, kind=exc.kind, code=exc.code)
                break
            duration_ms = int((time.monotonic() - started) * 1000)
            outcome = StepOutcome(outcome.status, outcome.message, duration_ms)
            report.steps.append(StepRecord(step.name, step.title, outcome))
            self._announce(step, outcome)
            sctx.log("info", "step-done", step=step.name, status=outcome.status.value, duration_ms=duration_ms)
        else:
            self.state = RunState.COMPLETED
        report.state = self.state
        report.snapshot = sctx.snapshot.to_payload()
        report.finished_at = utc_now_iso()
        sctx.log("info" if self.state == RunState.COMPLETED else "error", "plan-end", plan=plan.name, state=self.state.value)
        hook = plan.on_complete if self.state == RunState.COMPLETED else plan.on_failure
        if hook is not None:
            hook(sctx)
        return report

    def _execute(self, step: Step) -> StepOutcome:
        try:
            return self._apply(step)
        except (OSError, UnicodeError) as exc:
            raise StepCommandError(f"{step.title}: {exc}") from exc

    def _apply(self, step: Step) -> StepOutcome:
        sctx = self.sctx
        if step.guard is not None and step.guard(sctx):
            if step.when_present is not None:
                step.when_present(sctx)
            outcome = StepOutcome.skipped(step.guard_message)
        else:
            outcome = step.action(sctx) or StepOutcome.applied()
        if step.readiness is not None:
            policy = step.poll or sctx.config.poll
            result = poll_until(lambda: step.readiness(sctx), policy, sleep=sctx.sleep)
            if not result:
                raise ConvergenceTimeoutError(f"{step.title}: {step.readiness_label} not reached ({result.reason})")
            sctx.log("info", "ready", step=step.name, attempts=result.attempts)
        return outcome

    def _announce(self, step: Step, outcome: StepOutcome) -> None:
        console = self.sctx.console
        if outcome.status == StepStatus.WARNED:
            console.warning(outcome.message)
        elif outcome.status == StepStatus.SKIPPED:
            console.info(f"{step.title}: {outcome.message or 'no-op'}")
        else:
            console.success(outcome.message or f"{step.title} done")
