from __future__ import annotations

import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from ..adapters.protocols import ClusterManager, ContainerRuntime, KubeApi
from ..config import BootstrapConfig
from ..console import Console
from ..context import RunContext
from ..discovery import EnvironmentSnapshot
from ..logging import log_event
from ..network import http_status


@dataclass
class SequenceContext:
    """Everything a step may touch during one run."""

    ctx: RunContext
    config: BootstrapConfig
    docker: ContainerRuntime
    kind: ClusterManager
    kube: KubeApi
    console: Console = field(default_factory=Console)
    snapshot: EnvironmentSnapshot = field(default_factory=EnvironmentSnapshot)
    sleep: Callable[[float], None] = time.sleep
    which: Callable[[str], str | None] = shutil.which
    probe: Callable[..., int | None] = http_status

    def path(self, rel: str) -> Path:
        return self.ctx.project_root / rel

    @property
    def compose_dir(self) -> Path:
        return self.path(self.config.paths.compose_dir)

    @property
    def kubernetes_dir(self) -> Path:
        return self.path(self.config.paths.kubernetes_dir)

    def wait(self, seconds: float, reason: str) -> None:
        if seconds <= 0:
            return
        self.console.info(f"{reason} ({seconds:g}s)...")
        self.sleep(seconds)

    def log(self, level: str, action: str, **fields: object) -> None:
        if self.ctx.quiet and level == "info":
            return
        log_event(self.ctx, level, "sequencer", action, **fields)
