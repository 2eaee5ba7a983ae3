"""Bootstrap configuration.

Defaults reproduce the values the operator scripts always used. A YAML file can
override any of them; it is validated against `config.schema.json` before use.
The only behaviour switch read from the environment is `FORCE_REBUILD_CLUSTER`,
and it is folded into `BootstrapConfig.force_rebuild_cluster` here so nothing
downstream reads the environment.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Mapping

import jsonschema
import yaml

from .errors import ConfigError
from .polling import PollPolicy

SCHEMA_PATH = Path(__file__).resolve().with_name("config.schema.json")
DEFAULT_CONFIG_NAME = "cubeboot.yaml"
FORCE_REBUILD_ENV = "FORCE_REBUILD_CLUSTER"
_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_NAMESPACES = ("infra", "pipeline", "jupyter", "automl", "service", "aihub", "kubeflow")
DEFAULT_COMPOSE_CONTAINERS = (
    "docker-myapp-1",
    "docker-frontend-1",
    "docker-mysql-1",
    "docker-redis-1",
    "docker-worker-1",
    "docker-beat-1",
)
DEFAULT_NODE_LABELS = {
    "train": "true",
    "cpu": "true",
    "notebook": "true",
    "service": "true",
    "org": "public",
    "istio": "true",
    "kubeflow": "true",
    "kubeflow-dashboard": "true",
    "mysql": "true",
    "redis": "true",
    "monitoring": "true",
    "logging": "true",
}


@dataclass(frozen=True)
class PathsConfig:
    compose_dir: str = "install/docker"
    kubernetes_dir: str = "install/kubernetes"
    app_config: str = "install/docker/config.py"
    kubeconfig: str = "install/docker/kubeconfig/dev-kubeconfig"
    overlay_dir: str = "install/kubernetes/cube/overlays"


@dataclass(frozen=True)
class PortsConfig:
    dashboard_node_port: int = 30080
    minio_api_node_port: int = 30900
    minio_console_node_port: int = 30901


@dataclass(frozen=True)
class MysqlConfig:
    user: str = "root"
    password: str = "admin"
    database: str = "kubeflow"
    port: int = 3306

    def service_url(self, host: str) -> str:
        return f"mysql+pymysql://{self.user}:{self.password}@{host}:{self.port}/{self.database}?charset=utf8"


@dataclass(frozen=True)
class WaitsConfig:
    cleanup_settle: float = 5.0
    network_settle: float = 20.0
    dashboard_settle: float = 20.0
    workflows_settle: float = 30.0
    deploy_settle: float = 30.0
    repair_settle: float = 10.0


@dataclass(frozen=True)
class BootstrapConfig:
    force_rebuild_cluster: bool = False
    """Delete and recreate an existing kind cluster instead of reusing it."""

    cluster_name: str = "cube-studio"
    kind_network: str = "kind"
    compose_containers: tuple[str, ...] = DEFAULT_COMPOSE_CONTAINERS
    restart_services: tuple[str, ...] = ("myapp", "frontend")
    frontend_container: str = "docker-frontend-1"
    mysql_container: str = "docker-mysql-1"
    redis_container: str = "docker-redis-1"
    namespaces: tuple[str, ...] = DEFAULT_NAMESPACES
    node_labels: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_NODE_LABELS))
    data_root: str = "/data/k8s/kubeflow"
    data_dirs: tuple[str, ...] = ("pipeline/workspace", "pipeline/archives", "global", "minio")
    mysql: MysqlConfig = field(default_factory=MysqlConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    ports: PortsConfig = field(default_factory=PortsConfig)
    poll: PollPolicy = field(default_factory=PollPolicy)
    waits: WaitsConfig = field(default_factory=WaitsConfig)

    @property
    def node_name(self) -> str:
        return f"{self.cluster_name}-control-plane"

    @property
    def kube_context(self) -> str:
        return f"kind-{self.cluster_name}"

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        for key in ("compose_containers", "restart_services", "namespaces", "data_dirs"):
            payload[key] = list(payload[key])
        return payload


def env_flag(env: Mapping[str, str], name: str) -> bool:
    return str(env.get(name, "")).strip().lower() in _TRUTHY


def load_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def load_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def validate_payload(payload: Any, source: str) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"{source}: root must be a mapping")
    validator = jsonschema.Draft202012Validator(load_schema())
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.absolute_path))
    if errors:
        rendered = "; ".join(
            f"{'/'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}" for err in errors
        )
        raise ConfigError(f"{source}: invalid config: {rendered}")
    return payload


def resolve_config_path(project_root: Path, config_path: str | None) -> Path | None:
    if config_path:
        path = Path(config_path)
        path = path if path.is_absolute() else (project_root / path)
        if not path.is_file():
            raise ConfigError(f"config file not found: {path}")
        return path
    default = project_root / DEFAULT_CONFIG_NAME
    return default if default.is_file() else None


def config_from_payload(payload: Mapping[str, Any]) -> BootstrapConfig:
    base = BootstrapConfig()
    poll_kwargs = {**asdict(base.poll), **payload.get("poll", {})}
    try:
        poll = PollPolicy(**poll_kwargs)
    except ValueError as exc:
        raise ConfigError(f"invalid poll policy: {exc}") from exc
    return BootstrapConfig(
        force_rebuild_cluster=bool(payload.get("force_rebuild_cluster", base.force_rebuild_cluster)),
        cluster_name=str(payload.get("cluster_name", base.cluster_name)),
        kind_network=str(payload.get("kind_network", base.kind_network)),
        compose_containers=tuple(payload.get("compose_containers", base.compose_containers)),
        restart_services=tuple(payload.get("restart_services", base.restart_services)),
        frontend_container=str(payload.get("frontend_container", base.frontend_container)),
        mysql_container=str(payload.get("mysql_container", base.mysql_container)),
        redis_container=str(payload.get("redis_container", base.redis_container)),
        namespaces=tuple(payload.get("namespaces", base.namespaces)),
        node_labels={str(k): str(v) for k, v in payload.get("node_labels", base.node_labels).items()},
        data_root=str(payload.get("data_root", base.data_root)),
        data_dirs=tuple(payload.get("data_dirs", base.data_dirs)),
        mysql=MysqlConfig(**{**asdict(base.mysql), **payload.get("mysql", {})}),
        paths=PathsConfig(**{**asdict(base.paths), **payload.get("paths", {})}),
        ports=PortsConfig(**{**asdict(base.ports), **payload.get("ports", {})}),
        poll=poll,
        waits=WaitsConfig(**{**asdict(base.waits), **payload.get("waits", {})}),
    )


def load_config(
    project_root: Path,
    config_path: str | None = None,
    env: Mapping[str, str] | None = None,
    force_rebuild_cluster: bool | None = None,
) -> BootstrapConfig:
    """Build the run configuration.

    Precedence for `force_rebuild_cluster`: explicit argument, then the
    `FORCE_REBUILD_CLUSTER` environment variable, then the YAML file.
    """
    env = os.environ if env is None else env
    path = resolve_config_path(project_root, config_path)
    payload: dict[str, Any] = {}
    if path is not None:
        try:
            raw = load_yaml(path)
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
        payload = validate_payload(raw, str(path))
    if force_rebuild_cluster is not None:
        payload = {**payload, "force_rebuild_cluster": force_rebuild_cluster}
    elif str(env.get(FORCE_REBUILD_ENV, "")).strip():
        payload = {**payload, "force_rebuild_cluster": env_flag(env, FORCE_REBUILD_ENV)}
    return config_from_payload(payload)
