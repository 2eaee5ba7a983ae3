from __future__ import annotations

from typing import Any

import yaml

from .config import BootstrapConfig

DASHBOARD_NAMESPACE = "kube-system"
DASHBOARD_SERVICE_ACCOUNT = "kubernetes-dashboard-user1"
DASHBOARD_DEFAULT_SERVICE = "kubernetes-dashboard-user1"
DASHBOARD_NODEPORT_SERVICE = "kubernetes-dashboard-nodeport"
DASHBOARD_CONTAINER_PORT = 9090
MINIO_NAMESPACE = "kubeflow"
MINIO_SERVICE = "minio"
MINIO_NODEPORT_SERVICE = "minio-nodeport"


def dump(doc: dict[str, Any]) -> str:
    return yaml.safe_dump(doc, sort_keys=False, default_flow_style=False)


def kind_cluster_config(config: BootstrapConfig) -> dict[str, Any]:
    port = config.ports.dashboard_node_port
    return {
        "kind": "Cluster",
        "apiVersion": "kind.x-k8s.io/v1alpha4",
        "nodes": [
            {
                "role": "control-plane",
                "extraPortMappings": [{"containerPort": port, "hostPort": port, "protocol": "TCP"}],
            }
        ],
    }


def node_port_service(name: str, namespace: str, selector: dict[str, str], ports: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"type": "NodePort", "selector": selector, "ports": ports},
    }


def dashboard_node_port_service(config: BootstrapConfig) -> dict[str, Any]:
    return node_port_service(
        DASHBOARD_NODEPORT_SERVICE,
        DASHBOARD_NAMESPACE,
        {"k8s-app": DASHBOARD_DEFAULT_SERVICE},
        [
            {
                "port": DASHBOARD_CONTAINER_PORT,
                "targetPort": DASHBOARD_CONTAINER_PORT,
                "nodePort": config.ports.dashboard_node_port,
            }
        ],
    )


def minio_node_port_service(config: BootstrapConfig) -> dict[str, Any]:
    return node_port_service(
        MINIO_NODEPORT_SERVICE,
        MINIO_NAMESPACE,
        {"app": "minio"},
        [
            {"name": "api", "port": 9000, "targetPort": 9000, "nodePort": config.ports.minio_api_node_port},
            {"name": "console", "port": 9001, "targetPort": 9001, "nodePort": config.ports.minio_console_node_port},
        ],
    )
