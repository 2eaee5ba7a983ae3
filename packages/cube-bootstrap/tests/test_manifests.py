from __future__ import annotations

import yaml

from cubeboot.config import BootstrapConfig, PortsConfig
from cubeboot.manifests import dashboard_node_port_service, dump, kind_cluster_config, minio_node_port_service


def test_kind_config_maps_dashboard_port() -> None:
    doc = yaml.safe_load(dump(kind_cluster_config(BootstrapConfig(ports=PortsConfig(dashboard_node_port=30180)))))
    assert doc["apiVersion"] == "kind.x-k8s.io/v1alpha4"
    assert doc["nodes"] == [
        {
            "role": "control-plane",
            "extraPortMappings": [{"containerPort": 30180, "hostPort": 30180, "protocol": "TCP"}],
        }
    ]


def test_dashboard_service() -> None:
    doc = dashboard_node_port_service(BootstrapConfig())
    assert doc["metadata"] == {"name": "kubernetes-dashboard-nodeport", "namespace": "kube-system"}
    assert doc["spec"]["type"] == "NodePort"
    assert doc["spec"]["ports"] == [{"port": 9090, "targetPort": 9090, "nodePort": 30080}]


def test_minio_service_exposes_api_and_console() -> None:
    doc = minio_node_port_service(BootstrapConfig())
    assert doc["metadata"]["namespace"] == "kubeflow"
    assert doc["spec"]["selector"] == {"app": "minio"}
    assert {(p["name"], p["port"], p["nodePort"]) for p in doc["spec"]["ports"]} == {
        ("api", 9000, 30900),
        ("console", 9001, 30901),
    }


def test_dump_keeps_key_order() -> None:
    text = dump(minio_node_port_service(BootstrapConfig()))
    assert text.index("apiVersion") < text.index("kind") < text.index("metadata") < text.index("spec")
