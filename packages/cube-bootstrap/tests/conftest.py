from __future__ import annotations

import io
import socket
from pathlib import Path

import pytest
from hypothesis import settings
from hypothesis.database import DirectoryBasedExampleDatabase

from cubeboot.config import BootstrapConfig, WaitsConfig
from cubeboot.console import Console
from cubeboot.context import RunContext
from cubeboot.engine import SequenceContext
from cubeboot.polling import PollPolicy
from helpers import FakeEnvironment, fake_clients, make_project

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

_ROOT = Path(__file__).resolve().parents[3]
_HYPOTHESIS_DB = _ROOT / "artifacts/cubeboot/.hypothesis/examples"
_HYPOTHESIS_DB.parent.mkdir(parents=True, exist_ok=True)
settings.register_profile("cubeboot", database=DirectoryBasedExampleDatabase(_HYPOTHESIS_DB))
settings.load_profile("cubeboot")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FORCE_REBUILD_CLUSTER", "CUBE_STUDIO_ROOT", "RUN_ID", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    return make_project(tmp_path / "cube-studio")


@pytest.fixture
def fast_config() -> BootstrapConfig:
    return BootstrapConfig(
        poll=PollPolicy(attempts=4, interval_seconds=0.0),
        waits=WaitsConfig(0, 0, 0, 0, 0, 0),
    )


@pytest.fixture
def fake_env() -> FakeEnvironment:
    return FakeEnvironment()


@pytest.fixture
def run_ctx(project_root: Path) -> RunContext:
    return RunContext(
        run_id="pytest-run",
        project_root=project_root,
        output_format="text",
        verbose=False,
        quiet=False,
        log_json=False,
    )


@pytest.fixture
def make_sctx(run_ctx: RunContext, fake_env: FakeEnvironment, fast_config: BootstrapConfig):
    def _make(config: BootstrapConfig | None = None) -> SequenceContext:
        docker, kind, kube = fake_clients(fake_env)
        return SequenceContext(
            ctx=run_ctx,
            config=config or fast_config,
            docker=docker,
            kind=kind,
            kube=kube,
            console=Console(stream=io.StringIO()),
            sleep=fake_env.sleep,
            which=fake_env.which,
            probe=fake_env.probe,
        )

    return _make


@pytest.fixture
def sctx(make_sctx) -> SequenceContext:
    return make_sctx()
