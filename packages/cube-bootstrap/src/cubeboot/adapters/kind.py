from __future__ import annotations

from dataclasses import dataclass

from ..process import CommandResult
from ._base import CliAdapter


@dataclass(frozen=True)
class KindCli(CliAdapter):
    bin_name: str = "kind"

    def clusters(self) -> list[str]:
        result = self.run("get", "clusters")
        if not result.ok:
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def create_cluster(self, name: str, config_yaml: str) -> CommandResult:
        return self.run("create", "cluster", "--name", name, "--config", "-", input_text=config_yaml)

    def delete_cluster(self, name: str) -> CommandResult:
        return self.run("delete", "cluster", "--name", name)

    def kubeconfig(self, name: str, internal: bool = True) -> CommandResult:
        args = ["get", "kubeconfig", "--name", name]
        if internal:
            args.append("--internal")
        return self.run(*args)
