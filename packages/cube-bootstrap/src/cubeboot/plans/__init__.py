from __future__ import annotations

from typing import Callable

from ..config import BootstrapConfig
from ..engine import Plan
from . import repair, startup, status

PLANS: dict[str, Callable[[BootstrapConfig], Plan]] = {
    "up": startup.build_plan,
    "fix-network": repair.build_plan,
    "status": status.build_plan,
}


def build_plan(name: str, config: BootstrapConfig) -> Plan:
    return PLANS[name](config)


__all__ = ["PLANS", "build_plan"]
