"""Step bodies shared by the startup and repair plans."""

from __future__ import annotations

from pathlib import Path

from ..discovery import container_network_ip, network_member_ip
from ..engine import SequenceContext, StepOutcome
from ..errors import StepCommandError
from ..manifests import MINIO_NAMESPACE, MINIO_NODEPORT_SERVICE, dump, minio_node_port_service
from ..process import CommandResult
from ..rewrite import backup_file, set_env_fields, set_python_string_field, strip_carriage_returns

MINIO_HOST_FIELD = "MINIO_HOST"
KUBECONFIG_CONFIGMAP = "kubernetes-config"
CUBE_NAMESPACE = "infra"
_KUSTOMIZE_NOISE = ("Warning: 'vars' is deprecated",)


def require_ok(result: CommandResult, what: str) -> CommandResult:
    if not result.ok:
        raise StepCommandError(f"{what} failed (exit {result.code}): {result.combined_output or 'no output'}")
    return result


def apply_if_present(sctx: SequenceContext, path: Path) -> bool:
    if not path.is_file():
        sctx.log("info", "manifest-missing", path=str(path))
        return False
    require_ok(sctx.kube.apply_file(path), f"kubectl apply -f {path.name}")
    return True


def apply_present(sctx: SequenceContext, base: Path, names: tuple[str, ...]) -> int:
    return sum(1 for name in names if apply_if_present(sctx, base / name))


def show(sctx: SequenceContext, label: str, result: CommandResult) -> None:
    sctx.console.line(f"{label}:", "blue")
    sctx.console.line(result.combined_output or "(no output)")
    sctx.console.line()


def connect_to_kind_network(sctx: SequenceContext, container: str) -> CommandResult:
    result = sctx.docker.network_connect(sctx.config.kind_network, container)
    if not result.ok and not result.already_exists:
        sctx.log("warn", "network-connect", container=container, output=result.combined_output)
    return result


def ensure_minio_node_port(sctx: SequenceContext) -> str:
    if sctx.kube.service_exists(MINIO_NODEPORT_SERVICE, MINIO_NAMESPACE):
        return "MinIO NodePort service already exists"
    sctx.console.info("Creating MinIO NodePort service...")
    require_ok(sctx.kube.apply_manifest(dump(minio_node_port_service(sctx.config))), "create MinIO NodePort service")
    return "MinIO NodePort service created"


def discover_node_ip(sctx: SequenceContext) -> str | None:
    config = sctx.config
    ip = network_member_ip(sctx.docker.network_inspect(config.kind_network), config.node_name)
    sctx.snapshot.node_ip = ip
    sctx.log("info" if ip else "warn", "discover", target=config.node_name, address=ip or "")
    return ip


def discover_backing_services(sctx: SequenceContext) -> tuple[str | None, str | None]:
    config = sctx.config
    mysql_ip = container_network_ip(sctx.docker.inspect(config.mysql_container), config.kind_network)
    redis_ip = container_network_ip(sctx.docker.inspect(config.redis_container), config.kind_network)
    sctx.snapshot.mysql_ip = mysql_ip
    sctx.snapshot.redis_ip = redis_ip
    sctx.log("info", "discover", mysql=mysql_ip or "", redis=redis_ip or "")
    return mysql_ip, redis_ip


def update_minio_host(sctx: SequenceContext) -> StepOutcome:
    ip = discover_node_ip(sctx)
    if not ip:
        return StepOutcome.warned("Cannot determine the kind node address; MinIO config not updated")
    address = f"{ip}:{sctx.config.ports.minio_api_node_port}"
    sctx.console.info(f"Kind node address: {ip}")
    sctx.console.info(f"MinIO NodePort address: {address}")
    app_config = sctx.path(sctx.config.paths.app_config)
    if not app_config.is_file():
        return StepOutcome.warned(f"{app_config} not found; MinIO config not updated")
    result = set_python_string_field(app_config, MINIO_HOST_FIELD, address)
    if result.matches == 0:
        return StepOutcome.warned(f"{MINIO_HOST_FIELD} not found in {app_config.name}; MinIO config not updated")
    if not result.changed:
        return StepOutcome.applied(f"{MINIO_HOST_FIELD} already set to {address}")
    return StepOutcome.applied(f"{MINIO_HOST_FIELD} set to {address}")


def deploy_cube(sctx: SequenceContext, backup: bool = True, settle: bool = True) -> StepOutcome:
    config = sctx.config
    overlay = sctx.path(config.paths.overlay_dir)
    entrypoint = overlay / "config" / "entrypoint.sh"
    if entrypoint.is_file():
        strip_carriage_returns(entrypoint)

    mysql_ip, redis_ip = discover_backing_services(sctx)
    if not mysql_ip or not redis_ip:
        return StepOutcome.warned("Cannot determine MySQL or Redis address; Cube Studio deployment skipped")
    sctx.console.info(f"MySQL address: {mysql_ip}")
    sctx.console.info(f"Redis address: {redis_ip}")

    kustomization = overlay / "kustomization.yml"
    if not kustomization.is_file():
        return StepOutcome.warned(f"{kustomization} not found; Cube Studio deployment skipped")
    if backup:
        backup_file(kustomization)
    set_env_fields(
        kustomization,
        {"REDIS_HOST": redis_ip, "MYSQL_SERVICE": config.mysql.service_url(mysql_ip)},
    )

    kubeconfig = sctx.path(config.paths.kubeconfig)
    if kubeconfig.is_file():
        created = sctx.kube.create_configmap_from_file(KUBECONFIG_CONFIGMAP, CUBE_NAMESPACE, kubeconfig)
        if not created.ok and not created.already_exists:
            sctx.log("warn", "configmap", name=KUBECONFIG_CONFIGMAP, output=created.combined_output)
    else:
        sctx.console.warning(f"{kubeconfig} not found; {KUBECONFIG_CONFIGMAP} configmap not created")

    sctx.console.info("Applying kustomize overlay...")
    applied = require_ok(sctx.kube.apply_kustomize(overlay), "kubectl apply -k")
    for line in applied.combined_output.splitlines():
        if not any(noise in line for noise in _KUSTOMIZE_NOISE):
            sctx.console.line(line)

    if settle:
        sctx.wait(config.waits.deploy_settle, "Waiting for Cube Studio pods to start")
        show(sctx, f"Pods in {CUBE_NAMESPACE}", sctx.kube.get_pods(CUBE_NAMESPACE))
    return StepOutcome.applied("Cube Studio deployed to Kubernetes")
