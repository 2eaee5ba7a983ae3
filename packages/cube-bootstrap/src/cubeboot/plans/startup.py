"""Full cold start: compose stack, kind cluster, in-cluster services, Cube Studio."""

from __future__ import annotations

import os

from ..config import FORCE_REBUILD_ENV, BootstrapConfig
from ..discovery import compose_service_healthy, node_ready
from ..engine import Plan, SequenceContext, Step, StepOutcome
from ..errors import DependencyMissingError, StepCommandError
from ..manifests import (
    DASHBOARD_DEFAULT_SERVICE,
    DASHBOARD_NAMESPACE,
    MINIO_NAMESPACE,
    MINIO_SERVICE,
    dashboard_node_port_service,
    dump,
    kind_cluster_config,
)
from ..polling import poll_until
from . import common
from .summary import print_access_info, print_diagnostics
from .verify import verify_system

REQUIRED_TOOLS = ("docker", "kind", "kubectl")
COMPOSE_FILE = "docker-compose.yml"
MYSQL_SERVICE = "mysql"
DASHBOARD_MANIFESTS = ("dashboard/v2.6.1-cluster.yaml", "dashboard/v2.6.1-user.yaml")
STORAGE_MANIFESTS = (
    "pv-pvc-pipeline.yaml",
    "pv-pvc-infra.yaml",
    "pv-pvc-jupyter.yaml",
    "pv-pvc-automl.yaml",
    "pv-pvc-service.yaml",
)
WORKFLOW_MANIFESTS = (
    "argo/minio-pv-pvc-hostpath.yaml",
    "argo/pipeline-runner-rolebinding.yaml",
    "argo/install-3.4.3-all.yaml",
    "minio/minio-nodeport.yaml",
)


def check_dependencies(sctx: SequenceContext) -> StepOutcome:
    missing = [tool for tool in REQUIRED_TOOLS if sctx.which(tool) is None]
    if "docker" not in missing and not sctx.docker.compose_available():
        missing.append("docker compose")
    if missing:
        raise DependencyMissingError(f"missing required tools: {', '.join(missing)}; install them and retry")
    return StepOutcome.applied("All dependencies present")


def cluster_exists(sctx: SequenceContext) -> bool:
    return sctx.config.cluster_name in sctx.kind.clusters()


def cleanup(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    if (sctx.compose_dir / COMPOSE_FILE).is_file():
        down = sctx.docker.compose_down(sctx.compose_dir)
        if not down.ok:
            sctx.log("warn", "compose-down", output=down.combined_output)
    if not cluster_exists(sctx):
        return StepOutcome.applied("Cleanup complete")
    if config.force_rebuild_cluster:
        sctx.console.warning(f"Force-deleting existing kind cluster {config.cluster_name}...")
        deleted = sctx.kind.delete_cluster(config.cluster_name)
        if not deleted.ok:
            sctx.log("warn", "cluster-delete", output=deleted.combined_output)
        sctx.wait(config.waits.cleanup_settle, "Waiting for cluster teardown")
        return StepOutcome.applied("Cleanup complete, cluster removed for rebuild")
    sctx.console.info("Existing kind cluster found; reusing it to keep pulled images")
    sctx.console.warning(f"To force a rebuild set {FORCE_REBUILD_ENV}=true or pass --force-rebuild-cluster")
    return StepOutcome.applied("Cleanup complete")


def start_compose(sctx: SequenceContext) -> StepOutcome:
    common.require_ok(sctx.docker.compose_up(sctx.compose_dir), "docker compose up")
    sctx.console.info("Waiting for MySQL to become healthy...")
    return StepOutcome.applied("Docker Compose services started")


def mysql_healthy(sctx: SequenceContext) -> bool:
    return compose_service_healthy(sctx.docker.compose_ps(sctx.compose_dir), MYSQL_SERVICE)


def ensure_cluster_reachable(sctx: SequenceContext) -> None:
    if not sctx.kube.get_nodes().ok:
        name = sctx.config.cluster_name
        raise StepCommandError(f"kind cluster {name} exists but is unreachable; delete it and retry: kind delete cluster --name {name}")


def create_cluster(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    sctx.console.info(f"Creating kind cluster {config.cluster_name}...")
    common.require_ok(sctx.kind.create_cluster(config.cluster_name, dump(kind_cluster_config(config))), "kind create cluster")
    return StepOutcome.applied(f"Kind cluster {config.cluster_name} created")


def cluster_node_ready(sctx: SequenceContext) -> bool:
    return node_ready(sctx.kube.get_nodes(), sctx.config.node_name)


def sync_kubeconfig(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    result = common.require_ok(sctx.kind.kubeconfig(config.cluster_name, internal=True), "kind get kubeconfig")
    target = sctx.path(config.paths.kubeconfig)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(result.stdout, encoding="utf-8")
    try:
        os.chmod(target, 0o600)
    except OSError as exc:
        sctx.log("warn", "kubeconfig-chmod", path=str(target), error=str(exc))
    return StepOutcome.applied("kubeconfig synced")


def configure_network(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    attached = existing = unavailable = 0
    for container in config.compose_containers:
        result = common.connect_to_kind_network(sctx, container)
        if result.ok:
            attached += 1
        elif result.already_exists:
            existing += 1
        else:
            unavailable += 1
    restart = sctx.docker.compose_restart(sctx.compose_dir, config.restart_services)
    if not restart.ok:
        sctx.log("warn", "compose-restart", output=restart.combined_output)
    sctx.wait(config.waits.network_settle, "Waiting for network changes to settle")
    return StepOutcome.applied(
        f"Network configured ({attached} attached, {existing} already attached, {unavailable} unavailable)"
    )


def create_namespaces(sctx: SequenceContext) -> StepOutcome:
    created: list[str] = []
    existing: list[str] = []
    failed: list[str] = []
    for ns in sctx.config.namespaces:
        result = sctx.kube.create_namespace(ns)
        if result.ok:
            created.append(ns)
        elif result.already_exists:
            existing.append(ns)
        else:
            failed.append(ns)
            sctx.log("warn", "namespace-create", namespace=ns, output=result.combined_output)
    if failed:
        return StepOutcome.warned(f"Could not create namespaces: {', '.join(failed)}")
    return StepOutcome.applied(f"Namespaces ready ({len(created)} created, {len(existing)} existing)")


def configure_rbac(sctx: SequenceContext) -> StepOutcome:
    if common.apply_if_present(sctx, sctx.kubernetes_dir / "sa-rbac.yaml"):
        return StepOutcome.applied("RBAC configured")
    return StepOutcome.warned("RBAC manifest not found, skipped")


def deploy_dashboard(sctx: SequenceContext) -> StepOutcome:
    count = common.apply_present(sctx, sctx.kubernetes_dir, DASHBOARD_MANIFESTS)
    sctx.wait(sctx.config.waits.dashboard_settle, "Waiting for the dashboard to start")
    return StepOutcome.applied(f"K8s Dashboard deployed ({count} manifests)")


def expose_dashboard(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    removed = sctx.kube.delete_service(DASHBOARD_DEFAULT_SERVICE, DASHBOARD_NAMESPACE)
    if not removed.ok:
        sctx.log("warn", "service-delete", name=DASHBOARD_DEFAULT_SERVICE, output=removed.combined_output)
    common.require_ok(sctx.kube.apply_manifest(dump(dashboard_node_port_service(config))), "expose dashboard")
    return StepOutcome.applied(f"Dashboard exposed on port {config.ports.dashboard_node_port}")


def deploy_storage(sctx: SequenceContext) -> StepOutcome:
    count = common.apply_present(sctx, sctx.kubernetes_dir, STORAGE_MANIFESTS)
    return StepOutcome.applied(f"Storage deployed ({count} manifests)")


def create_directories(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    failed = []
    for rel in config.data_dirs:
        target = f"{config.data_root.rstrip('/')}/{rel}"
        if not sctx.docker.exec(config.node_name, "mkdir", "-p", target).ok:
            failed.append(target)
    if failed:
        return StepOutcome.warned(f"Could not create directories in {config.node_name}: {', '.join(failed)}")
    return StepOutcome.applied("Directories created")


def deploy_workflows(sctx: SequenceContext) -> StepOutcome:
    count = common.apply_present(sctx, sctx.kubernetes_dir, WORKFLOW_MANIFESTS)
    sctx.wait(sctx.config.waits.workflows_settle, "Waiting for the workflow engine to start")
    return StepOutcome.applied(f"Workflow engine deployed ({count} manifests)")


def update_minio_config(sctx: SequenceContext) -> StepOutcome:
    sctx.console.info("Waiting for the MinIO service...")
    found = poll_until(lambda: sctx.kube.service_exists(MINIO_SERVICE, MINIO_NAMESPACE), sctx.config.poll, sleep=sctx.sleep)
    if not found:
        return StepOutcome.warned("MinIO service not found; config update skipped")
    sctx.console.info(common.ensure_minio_node_port(sctx))
    return common.update_minio_host(sctx)


def label_node(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    result = sctx.kube.label_node(config.node_name, config.node_labels)
    if not result.ok:
        return StepOutcome.warned(f"Could not label node {config.node_name}: {result.combined_output}")
    return StepOutcome.applied("Node labels configured")


def configure_service(sctx: SequenceContext) -> StepOutcome:
    if common.apply_if_present(sctx, sctx.kubernetes_dir / "kubeflow-dashboard-service.yaml"):
        return StepOutcome.applied("Service configured")
    return StepOutcome.warned("Service manifest not found, skipped")


def deploy_cube(sctx: SequenceContext) -> StepOutcome:
    return common.deploy_cube(sctx, backup=True, settle=True)


def build_plan(config: BootstrapConfig) -> Plan:
    return Plan(
        name="up",
        title="Cube Studio startup",
        steps=(
            Step("check-dependencies", "Check system dependencies", check_dependencies),
            Step("cleanup", "Clean up previous run", cleanup),
            Step(
                "start-compose",
                "Start Docker Compose services",
                start_compose,
                readiness=mysql_healthy,
                readiness_label="MySQL healthy",
            ),
            Step(
                "create-cluster",
                "Create kind Kubernetes cluster",
                create_cluster,
                guard=cluster_exists,
                guard_message=f"cluster {config.cluster_name} already exists, creation skipped",
                when_present=ensure_cluster_reachable,
                readiness=cluster_node_ready,
                readiness_label=f"node {config.node_name} Ready",
            ),
            Step("sync-kubeconfig", "Sync kind kubeconfig", sync_kubeconfig),
            Step("configure-network", "Connect Docker containers to the kind network", configure_network),
            Step("create-namespaces", "Create Kubernetes namespaces", create_namespaces),
            Step("configure-rbac", "Configure RBAC", configure_rbac),
            Step("deploy-dashboard", "Deploy K8s Dashboard", deploy_dashboard),
            Step("expose-dashboard", "Expose K8s Dashboard", expose_dashboard),
            Step("deploy-storage", "Deploy storage", deploy_storage),
            Step("create-directories", "Create data directories in the kind node", create_directories),
            Step("deploy-workflows", "Deploy MinIO and Argo Workflows", deploy_workflows),
            Step("update-minio-config", "Update MinIO config", update_minio_config),
            Step("label-node", "Add node labels", label_node),
            Step("configure-service", "Configure kubeflow-dashboard service", configure_service),
            Step("deploy-cube", "Deploy Cube Studio to Kubernetes", deploy_cube),
            Step("verify", "Verify system state", verify_system),
        ),
        on_complete=print_access_info,
        on_failure=print_diagnostics,
    )
