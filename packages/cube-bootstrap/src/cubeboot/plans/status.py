from __future__ import annotations

from ..config import BootstrapConfig
from ..engine import Plan, Step
from .verify import verify_system


def build_plan(config: BootstrapConfig) -> Plan:  # noqa: ARG001
    return Plan(
        name="status",
        title="Cube Studio status",
        steps=(Step("verify", "Verify system state", verify_system),),
    )
