from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..context import RunContext
from ..process import CommandResult, run_command


@dataclass(frozen=True)
class CliAdapter:
    ctx: RunContext
    bin_name: str

    def run(self, *args: str, cwd: Path | None = None, input_text: str | None = None) -> CommandResult:
        return run_command(
            [self.bin_name, *[str(a) for a in args]],
            cwd or self.ctx.project_root,
            input_text=input_text,
            ctx=self.ctx,
        )
