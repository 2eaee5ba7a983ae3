from __future__ import annotations

from ..discovery import container_on_network
from ..engine import SequenceContext, StepOutcome
from ..rewrite import read_python_string_field, read_text_exact
from .common import MINIO_HOST_FIELD, show

CUBE_URL = "http://localhost"
DASHBOARD_PROXY_PATH = "/k8s/dashboard/user1/"


def dashboard_url(sctx: SequenceContext) -> str:
    return f"http://localhost:{sctx.config.ports.dashboard_node_port}"


def verify_system(sctx: SequenceContext) -> StepOutcome:
    console = sctx.console
    console.header("System status")
    show(sctx, "Docker Compose services", sctx.docker.compose_ps(sctx.compose_dir))
    show(sctx, "Kubernetes nodes", sctx.kube.get_nodes())
    show(sctx, "Kubernetes pods", sctx.kube.get_pods())

    pending = []
    for label, url in (("K8s Dashboard", dashboard_url(sctx)), ("Cube Studio", CUBE_URL)):
        if sctx.probe(url) is not None:
            console.line(f"OK  {label}: {url}", "green")
        else:
            console.line(f"--  {label} not ready yet, try again later", "yellow")
            pending.append(label)
    console.line()
    if pending:
        return StepOutcome.warned(f"Not reachable yet: {', '.join(pending)}")
    return StepOutcome.applied("System verification complete")


def current_minio_host(sctx: SequenceContext) -> str | None:
    app_config = sctx.path(sctx.config.paths.app_config)
    if not app_config.is_file():
        return None
    return read_python_string_field(read_text_exact(app_config), MINIO_HOST_FIELD)


def verify_repair(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    console = sctx.console
    console.header("Repair results")
    problems = []
    if container_on_network(sctx.docker.inspect(config.frontend_container), config.kind_network):
        console.line(f"OK  frontend attached to the {config.kind_network} network", "green")
    else:
        console.line(f"--  frontend not attached to the {config.kind_network} network", "yellow")
        problems.append("frontend network")
    if sctx.probe(f"{CUBE_URL}{DASHBOARD_PROXY_PATH}", method="HEAD") == 200:
        console.line("OK  K8s Dashboard reachable", "green")
    else:
        console.line("--  K8s Dashboard not reachable", "yellow")
        problems.append("dashboard")
    console.line(f"Current MinIO config: {current_minio_host(sctx) or '(unset)'}", "blue")
    console.line()
    if problems:
        return StepOutcome.warned(f"Repair incomplete: {', '.join(problems)}")
    return StepOutcome.applied("Repair verified")
