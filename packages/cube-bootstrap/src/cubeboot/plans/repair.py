"""Post-restart repair of container networking, MinIO address and Cube Studio deploy."""

from __future__ import annotations

from ..config import BootstrapConfig
from ..engine import Plan, SequenceContext, Step, StepOutcome
from . import common
from .summary import print_diagnostics, print_repair_hints
from .verify import verify_repair


def connect_frontend(sctx: SequenceContext) -> StepOutcome:
    result = common.connect_to_kind_network(sctx, sctx.config.frontend_container)
    if result.already_exists:
        return StepOutcome.skipped("frontend already attached to the kind network")
    if not result.ok:
        return StepOutcome.warned(f"Could not attach frontend: {result.combined_output}")
    return StepOutcome.applied("frontend attached to the kind network")


def update_minio_config(sctx: SequenceContext) -> StepOutcome:
    sctx.console.info(common.ensure_minio_node_port(sctx))
    return common.update_minio_host(sctx)


def connect_backing_services(sctx: SequenceContext) -> StepOutcome:
    for container in (sctx.config.mysql_container, sctx.config.redis_container):
        common.connect_to_kind_network(sctx, container)
    return StepOutcome.applied("MySQL and Redis attached to the kind network")


def deploy_cube(sctx: SequenceContext) -> StepOutcome:
    return common.deploy_cube(sctx, backup=False, settle=False)


def restart_services(sctx: SequenceContext) -> StepOutcome:
    config = sctx.config
    result = sctx.docker.compose_restart(sctx.compose_dir, config.restart_services)
    if not result.ok:
        sctx.log("warn", "compose-restart", output=result.combined_output)
    sctx.wait(config.waits.repair_settle, "Waiting for services to start")
    return StepOutcome.applied(f"Restarted {', '.join(config.restart_services)}")


def build_plan(config: BootstrapConfig) -> Plan:
    return Plan(
        name="fix-network",
        title="Cube Studio network repair",
        steps=(
            Step("connect-frontend", "Connect frontend to the kind network", connect_frontend),
            Step("update-minio-config", "Configure MinIO NodePort access", update_minio_config),
            Step("connect-backing-services", "Connect MySQL and Redis to the kind network", connect_backing_services),
            Step("deploy-cube", "Deploy Cube Studio to Kubernetes", deploy_cube),
            Step("restart-services", f"Restart {' and '.join(config.restart_services)}", restart_services),
            Step("verify-repair", "Verify repair", verify_repair),
        ),
        on_complete=print_repair_hints,
        on_failure=print_diagnostics,
    )
