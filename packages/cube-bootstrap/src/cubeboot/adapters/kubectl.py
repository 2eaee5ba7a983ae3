from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..process import CommandResult
from ._base import CliAdapter


@dataclass(frozen=True)
class KubectlCli(CliAdapter):
    bin_name: str = "kubectl"
    context: str | None = None

    def kube(self, *args: str, cwd: Path | None = None, input_text: str | None = None) -> CommandResult:
        prefix = ["--context", self.context] if self.context else []
        return self.run(*prefix, *args, cwd=cwd, input_text=input_text)

    def get_nodes(self) -> CommandResult:
        return self.kube("get", "nodes", "--no-headers")

    def create_namespace(self, name: str) -> CommandResult:
        return self.kube("create", "namespace", name)

    def apply_file(self, path: Path) -> CommandResult:
        return self.kube("apply", "-f", str(path))

    def apply_manifest(self, manifest: str) -> CommandResult:
        return self.kube("apply", "-f", "-", input_text=manifest)

    def apply_kustomize(self, directory: Path) -> CommandResult:
        return self.kube("apply", "-k", ".", cwd=directory)

    def service_exists(self, name: str, namespace: str) -> bool:
        return self.kube("get", "svc", name, "-n", namespace).ok

    def delete_service(self, name: str, namespace: str) -> CommandResult:
        return self.kube("delete", "svc", name, "-n", namespace, "--ignore-not-found")

    def label_node(self, node: str, labels: Mapping[str, str]) -> CommandResult:
        pairs = [f"{key}={value}" for key, value in labels.items()]
        return self.kube("label", "node", node, *pairs, "--overwrite")

    def create_configmap_from_file(self, name: str, namespace: str, path: Path) -> CommandResult:
        return self.kube("create", "configmap", name, "-n", namespace, f"--from-file={path}")

    def create_token(self, service_account: str, namespace: str, duration: str) -> CommandResult:
        return self.kube("create", "token", "-n", namespace, service_account, f"--duration={duration}")

    def get_pods(self, namespace: str | None = None) -> CommandResult:
        scope = ["-n", namespace] if namespace else ["-A"]
        return self.kube("get", "pods", *scope)
