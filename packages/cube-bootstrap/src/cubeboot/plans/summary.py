from __future__ import annotations

from ..engine import SequenceContext
from ..manifests import DASHBOARD_NAMESPACE, DASHBOARD_SERVICE_ACCOUNT
from .verify import CUBE_URL, dashboard_url

RULE = "-" * 78
TOKEN_DURATION = "87600h"
INFERENCE_URL = "http://localhost:8080"


def print_access_info(sctx: SequenceContext) -> None:
    console = sctx.console
    compose_dir = sctx.compose_dir
    console.header("Startup complete")
    console.line("Access:")
    console.line(RULE)
    console.line(f"  Cube Studio:            {CUBE_URL}")
    console.line(f"  K8s Dashboard:          {dashboard_url(sctx)}")
    console.line(f"  Inference service:      {INFERENCE_URL} (optional)")
    console.line(RULE)
    console.line()
    console.line("K8s Dashboard login token:")
    console.line(RULE)
    token = sctx.kube.create_token(DASHBOARD_SERVICE_ACCOUNT, DASHBOARD_NAMESPACE, TOKEN_DURATION)
    console.line(token.stdout.strip() if token.ok and token.stdout.strip() else "  Token not available yet, fetch it later")
    console.line(RULE)
    console.line()
    console.line("Common commands:")
    console.line(f"  - myapp logs:        cd {compose_dir} && docker compose logs -f myapp")
    console.line("  - K8s pods:          kubectl get pods -A")
    console.line(f"  - stop everything:   cd {compose_dir} && docker compose down")
    console.line()
    console.success("Cube Studio is up")


def print_diagnostics(sctx: SequenceContext) -> None:
    console = sctx.console
    config = sctx.config
    console.error("Run failed; inspect the current state with:")
    console.line(f"  - kind get clusters            (expect {config.cluster_name})")
    console.line("  - kubectl get nodes")
    console.line("  - kubectl get pods -A")
    console.line(f"  - cd {sctx.compose_dir} && docker compose ps")
    console.line(f"  - run report: {sctx.ctx.run_dir}")


def print_repair_hints(sctx: SequenceContext) -> None:
    console = sctx.console
    console.success("Repair finished")
    console.line()
    console.line("If problems persist, check:")
    console.line("  1. kind cluster is running:   kubectl get nodes")
    console.line("  2. MinIO service is healthy:  kubectl get svc minio -n kubeflow")
    console.line(f"  3. myapp logs:                cd {sctx.compose_dir} && docker compose logs -f myapp")
    console.line()
