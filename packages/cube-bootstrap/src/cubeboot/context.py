from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

OutputFormat = Literal["text", "json"]

ROOT_ENV = "CUBE_STUDIO_ROOT"


@dataclass(frozen=True)
class RunContext:
    run_id: str
    project_root: Path
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool

    @property
    def artifacts_root(self) -> Path:
        return (self.project_root / "artifacts/cubeboot").resolve()

    @property
    def run_dir(self) -> Path:
        return self.artifacts_root / self.run_id

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        project_root: str | None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
    ) -> "RunContext":
        default_run = f"cubeboot-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"
        resolved_run_id = run_id or os.environ.get("RUN_ID") or default_run
        root = Path(project_root or os.environ.get(ROOT_ENV) or Path.cwd())
        return cls(
            run_id=resolved_run_id,
            project_root=root.resolve(),
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
        )
