from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .logging import log_event

if TYPE_CHECKING:
    from .context import RunContext

ALREADY_EXISTS_MARKERS = ("already exists", "AlreadyExists")


@dataclass(frozen=True)
class CommandResult:
    code: int
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def ok(self) -> bool:
        return self.code == 0

    @property
    def combined_output(self) -> str:
        return (self.stdout + self.stderr).strip()

    @property
    def already_exists(self) -> bool:
        output = self.combined_output
        return self.code != 0 and any(marker in output for marker in ALREADY_EXISTS_MARKERS)


def run_command(
    cmd: list[str],
    cwd: Path,
    timeout_seconds: int = 0,
    input_text: str | None = None,
    ctx: RunContext | None = None,
) -> CommandResult:
    if not Path(cwd).is_dir():
        result = CommandResult(code=1, stdout="", stderr=f"working directory not found: {cwd}", duration_ms=0)
    else:
        result = _spawn(cmd, cwd, timeout_seconds, input_text)
    if ctx and not ctx.quiet:
        fields: dict[str, object] = {
            "command": " ".join(cmd),
            "cwd": str(cwd),
            "code": result.code,
            "duration_ms": result.duration_ms,
        }
        if ctx.verbose and result.code != 0:
            fields["output"] = result.combined_output[-500:]
        log_event(ctx, "info" if result.code == 0 else "warn", "process", "run-command", **fields)
    return result


def _spawn(cmd: list[str], cwd: Path, timeout_seconds: int, input_text: str | None) -> CommandResult:
    started = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            input=input_text,
            text=True,
            capture_output=True,
            check=False,
            timeout=(timeout_seconds if timeout_seconds > 0 else None),
        )
        result = CommandResult(
            code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except subprocess.TimeoutExpired as exc:
        result = CommandResult(
            code=124,
            stdout=_decode(exc.stdout),
            stderr=(_decode(exc.stderr) + f"\ncommand timed out after {timeout_seconds}s").strip(),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except FileNotFoundError:
        result = CommandResult(
            code=127,
            stdout="",
            stderr=f"command not found: {cmd[0]}",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    return result


def _decode(raw: str | bytes | None) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw
