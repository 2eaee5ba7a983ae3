from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ..process import CommandResult
from ._base import CliAdapter


@dataclass(frozen=True)
class DockerCli(CliAdapter):
    bin_name: str = "docker"

    def compose_available(self) -> bool:
        return self.run("compose", "version").ok

    def compose_up(self, project_dir: Path) -> CommandResult:
        return self.run("compose", "up", "-d", cwd=project_dir)

    def compose_down(self, project_dir: Path) -> CommandResult:
        return self.run("compose", "down", cwd=project_dir)

    def compose_ps(self, project_dir: Path) -> CommandResult:
        return self.run("compose", "ps", cwd=project_dir)

    def compose_restart(self, project_dir: Path, services: Sequence[str]) -> CommandResult:
        return self.run("compose", "restart", *services, cwd=project_dir)

    def network_connect(self, network: str, container: str) -> CommandResult:
        return self.run("network", "connect", network, container)

    def network_inspect(self, network: str) -> CommandResult:
        return self.run("network", "inspect", network)

    def inspect(self, container: str) -> CommandResult:
        return self.run("inspect", container)

    def exec(self, container: str, *cmd: str) -> CommandResult:
        return self.run("exec", container, *cmd)
