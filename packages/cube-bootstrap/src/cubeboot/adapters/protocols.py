"""Client interfaces the sequencer talks to.

The CLI-backed implementations live next to this module; tests supply fakes
with the same methods.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, Sequence

from ..process import CommandResult


class ContainerRuntime(Protocol):
    def compose_available(self) -> bool: ...

    def compose_up(self, project_dir: Path) -> CommandResult: ...

    def compose_down(self, project_dir: Path) -> CommandResult: ...

    def compose_ps(self, project_dir: Path) -> CommandResult: ...

    def compose_restart(self, project_dir: Path, services: Sequence[str]) -> CommandResult: ...

    def network_connect(self, network: str, container: str) -> CommandResult: ...

    def network_inspect(self, network: str) -> CommandResult: ...

    def inspect(self, container: str) -> CommandResult: ...

    def exec(self, container: str, *cmd: str) -> CommandResult: ...


class ClusterManager(Protocol):
    def clusters(self) -> list[str]: ...

    def create_cluster(self, name: str, config_yaml: str) -> CommandResult: ...

    def delete_cluster(self, name: str) -> CommandResult: ...

    def kubeconfig(self, name: str, internal: bool = True) -> CommandResult: ...


class KubeApi(Protocol):
    def get_nodes(self) -> CommandResult: ...

    def create_namespace(self, name: str) -> CommandResult: ...

    def apply_file(self, path: Path) -> CommandResult: ...

    def apply_manifest(self, manifest: str) -> CommandResult: ...

    def apply_kustomize(self, directory: Path) -> CommandResult: ...

    def service_exists(self, name: str, namespace: str) -> bool: ...

    def delete_service(self, name: str, namespace: str) -> CommandResult: ...

    def label_node(self, node: str, labels: Mapping[str, str]) -> CommandResult: ...

    def create_configmap_from_file(self, name: str, namespace: str, path: Path) -> CommandResult: ...

    def create_token(self, service_account: str, namespace: str, duration: str) -> CommandResult: ...

    def get_pods(self, namespace: str | None = None) -> CommandResult: ...
