from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ..exit_codes import OK
from ..logging import utc_now_iso
from .step import StepOutcome

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "run-report.schema.json"


class RunState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FAILED = "failed"
    COMPLETED = "completed"


@dataclass(frozen=True)
class StepRecord:
    name: str
    title: str
    outcome: StepOutcome

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "status": self.outcome.status.value,
            "message": self.outcome.message,
            "duration_ms": self.outcome.duration_ms,
        }


@dataclass
class RunReport:
    plan: str
    run_id: str
    state: RunState = RunState.NOT_STARTED
    steps: list[StepRecord] = field(default_factory=list)
    snapshot: dict[str, str | None] = field(default_factory=dict)
    error: dict[str, Any] | None = None
    started_at: str = field(default_factory=utc_now_iso)
    finished_at: str | None = None

    @property
    def exit_code(self) -> int:
        if self.state == RunState.COMPLETED:
            return OK
        if self.error is not None:
            return int(self.error["code"])
        return 1

    def statuses(self) -> dict[str, str]:
        return {record.name: record.outcome.status.value for record in self.steps}

    def to_payload(self) -> dict[str, Any]:
        return {
            "schema_version": 1,
            "tool": "cubeboot",
            "plan": self.plan,
            "run_id": self.run_id,
            "status": self.state.value,
            "exit_code": self.exit_code,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "steps": [record.to_payload() for record in self.steps],
            "snapshot": self.snapshot,
            "error": self.error,
        }

    def write(self, run_dir: Path) -> Path:
        run_dir.mkdir(parents=True, exist_ok=True)
        out = run_dir / f"{self.plan}-report.json"
        out.write_text(json.dumps(self.to_payload(), indent=2, sort_keys=True) + "\n", encoding="utf-8")
        return out
