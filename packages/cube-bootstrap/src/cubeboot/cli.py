from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from . import __version__
from .adapters import ClusterManager, ContainerRuntime, DockerCli, KindCli, KubeApi, KubectlCli
from .config import BootstrapConfig, load_config
from .console import Console
from .context import RunContext
from .engine import SequenceContext, Sequencer
from .errors import ScriptError
from .exit_codes import ERR_INTERNAL, ERR_USAGE, OK
from .logging import log_event
from .plans import PLANS, build_plan


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cubeboot", description="Bootstrap and repair a local Cube Studio environment")
    p.add_argument("--version", action="version", version=f"cubeboot {__version__}")
    p.add_argument("--project-root", help="Cube Studio checkout (default: $CUBE_STUDIO_ROOT or the current directory)")
    p.add_argument("--config", help="YAML config file (default: <project-root>/cubeboot.yaml when present)")
    p.add_argument("--run-id", help="run identifier for reports")
    p.add_argument("--format", choices=["text", "json"], default="text", help="output format")
    p.add_argument("--log-json", action="store_true", help="emit structured log events as JSON lines")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable verbose diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    up_p = sub.add_parser("up", help="cold start the compose stack, kind cluster and Cube Studio")
    up_p.add_argument(
        "--force-rebuild-cluster",
        action="store_true",
        help="delete and recreate an existing kind cluster (same as FORCE_REBUILD_CLUSTER=true)",
    )
    sub.add_parser("fix-network", help="repair networking and MinIO config after a restart")
    sub.add_parser("status", help="show compose, node and pod state and probe the endpoints")
    sub.add_parser("config", help="print the resolved configuration as JSON")
    return p


def build_clients(ctx: RunContext, config: BootstrapConfig) -> tuple[ContainerRuntime, ClusterManager, KubeApi]:
    return DockerCli(ctx), KindCli(ctx), KubectlCli(ctx, context=config.kube_context)


def run_plan(ctx: RunContext, config: BootstrapConfig, plan_name: str) -> int:
    docker, kind, kube = build_clients(ctx, config)
    console = Console(stream=sys.stderr if ctx.output_format == "json" else None, quiet=ctx.quiet)
    sctx = SequenceContext(ctx=ctx, config=config, docker=docker, kind=kind, kube=kube, console=console)
    report = Sequencer(sctx).run(build_plan(plan_name, config))
    out = report.write(ctx.run_dir)
    log_event(ctx, "info", "cli", "report-written", path=str(out), status=report.state.value)
    if ctx.output_format == "json":
        print(json.dumps(report.to_payload(), sort_keys=True))
    return report.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    ns = build_parser().parse_args(argv)
    ctx = RunContext.from_args(
        ns.run_id,
        ns.project_root,
        output_format=ns.format,
        verbose=ns.verbose,
        quiet=ns.quiet,
        log_json=ns.log_json,
    )
    try:
        should_emit_diag = bool(ctx.verbose) and (not ctx.quiet) and (ctx.output_format != "json")
        if should_emit_diag:
            print(f"run_id={ctx.run_id} project_root={ctx.project_root}", file=sys.stderr)
            log_event(ctx, "info", "cli", "start", cmd=ns.cmd)
        force = True if getattr(ns, "force_rebuild_cluster", False) else None
        config = load_config(ctx.project_root, ns.config, force_rebuild_cluster=force)
        if ns.cmd == "config":
            print(json.dumps(config.to_payload(), indent=2, sort_keys=True))
            return OK
        if ns.cmd in PLANS:
            return run_plan(ctx, config, ns.cmd)
        return ERR_USAGE
    except ScriptError as exc:
        log_event(ctx, "error", "cli", "failed", kind=exc.kind, code=exc.code)
        if ctx.output_format == "json":
            print(
                json.dumps(
                    {
                        "schema_version": 1,
                        "tool": "cubeboot",
                        "status": "fail",
                        "error": {"message": str(exc), "code": exc.code, "kind": exc.kind},
                    },
                    sort_keys=True,
                ),
                file=sys.stderr,
            )
        else:
            print(str(exc), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        log_event(ctx, "error", "cli", "internal-error", error=repr(exc))
        print(f"internal error: {exc}", file=sys.stderr)
        return ERR_INTERNAL


def start_main() -> int:
    return main(["up"])


def fix_network_main() -> int:
    return main(["fix-network"])


if __name__ == "__main__":
    raise SystemExit(main())
