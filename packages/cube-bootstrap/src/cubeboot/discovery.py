"""Best-effort extraction of runtime values from docker and kubectl output.

Every function here returns None (or False) on a miss instead of raising: a
missing address must degrade the dependent step to a warning, never crash the
run.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from typing import Any

from .process import CommandResult

_HEALTHY_RE_TEMPLATE = r"{service}.*\bUp\b.*\(healthy\)"


@dataclass
class EnvironmentSnapshot:
    node_ip: str | None = None
    mysql_ip: str | None = None
    redis_ip: str | None = None

    def to_payload(self) -> dict[str, str | None]:
        return asdict(self)


def _json_documents(result: CommandResult) -> list[dict[str, Any]]:
    if not result.ok:
        return []
    try:
        payload = json.loads(result.stdout)
    except json.JSONDecodeError:
        return []
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        return []
    return [doc for doc in payload if isinstance(doc, dict)]


def network_member_ip(result: CommandResult, container: str) -> str | None:
    """IPv4 address of `container` from `docker network inspect <net>` output."""
    for doc in _json_documents(result):
        members = doc.get("Containers") or {}
        if not isinstance(members, dict):
            continue
        for member in members.values():
            if not isinstance(member, dict) or member.get("Name") != container:
                continue
            address = str(member.get("IPv4Address") or "").split("/", 1)[0].strip()
            if address:
                return address
    return None


def container_network_ip(result: CommandResult, network: str) -> str | None:
    """Address of a container on `network` from `docker inspect <container>` output."""
    for doc in _json_documents(result):
        networks = (doc.get("NetworkSettings") or {}).get("Networks") or {}
        if not isinstance(networks, dict):
            continue
        attachment = networks.get(network)
        if isinstance(attachment, dict):
            address = str(attachment.get("IPAddress") or "").strip()
            if address:
                return address
    return None


def container_on_network(result: CommandResult, network: str) -> bool:
    for doc in _json_documents(result):
        networks = (doc.get("NetworkSettings") or {}).get("Networks") or {}
        if isinstance(networks, dict) and network in networks:
            return True
    return False


def compose_service_healthy(result: CommandResult, service: str) -> bool:
    """True when `docker compose ps` lists `service` as Up and (healthy)."""
    if not result.ok:
        return False
    pattern = re.compile(_HEALTHY_RE_TEMPLATE.format(service=re.escape(service)))
    return any(pattern.search(line) for line in result.stdout.splitlines())


def node_ready(result: CommandResult, node: str) -> bool:
    """True when `kubectl get nodes --no-headers` reports `node` with status Ready."""
    if not result.ok:
        return False
    for line in result.stdout.splitlines():
        cols = line.split()
        if len(cols) >= 2 and cols[0] == node:
            return "Ready" in cols[1].split(",")
    return False
