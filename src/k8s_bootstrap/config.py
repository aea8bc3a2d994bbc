"""YAML configuration loader for the cluster bootstrap tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from consensus_k8s.config import (
    DISCOVERY_ATTEMPTS,
    DISCOVERY_INTERVAL,
    NODE_IMAGE,
    NODE_IMAGE_PULL_POLICY,
    NODES_PORT,
    ClusterSpec,
    DiscoverySettings,
)


@dataclass
class KubernetesConfig:
    kubeconfig: Optional[Path] = None
    context: Optional[str] = None


@dataclass
class BootstrapConfig:
    cluster: ClusterSpec
    discovery: DiscoverySettings = field(default_factory=DiscoverySettings)
    kubernetes: KubernetesConfig = field(default_factory=KubernetesConfig)


def _section(data: dict, key: str) -> dict:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{key}' section must be a mapping")
    return section


def _parse_cluster(section: dict) -> ClusterSpec:
    namespace = section.get("namespace")
    if not namespace:
        raise ValueError("cluster section missing 'namespace'")
    if "nodes" not in section:
        raise ValueError("cluster section missing 'nodes'")

    return ClusterSpec(
        namespace=str(namespace),
        nodes=int(section["nodes"]),
        seeds=int(section.get("seeds", 1)),
        node_port=int(section.get("node_port", NODES_PORT)),
        image=str(section.get("image", NODE_IMAGE)),
        image_pull_policy=str(section.get("image_pull_policy", NODE_IMAGE_PULL_POLICY)),
    )


def _parse_discovery(section: dict) -> DiscoverySettings:
    attempts = int(section.get("attempts", DISCOVERY_ATTEMPTS))
    interval = float(section.get("interval", DISCOVERY_INTERVAL))
    if attempts < 1:
        raise ValueError("discovery 'attempts' must be at least 1")
    if interval < 0:
        raise ValueError("discovery 'interval' cannot be negative")
    return DiscoverySettings(
        attempts=attempts,
        interval=interval,
        require_ready=bool(section.get("require_ready", False)),
    )


def _parse_kubernetes(section: dict) -> KubernetesConfig:
    kubeconfig = section.get("kubeconfig")
    context = section.get("context")
    return KubernetesConfig(
        kubeconfig=Path(kubeconfig).expanduser() if kubeconfig else None,
        context=str(context) if context else None,
    )


def load_config(path: Path) -> BootstrapConfig:
    data = yaml.safe_load(path.read_text())
    if not isinstance(data, dict):
        raise ValueError("Bootstrap configuration must be a mapping")

    if data.get("cluster") is None:
        raise ValueError("Configuration missing 'cluster' section")

    return BootstrapConfig(
        cluster=_parse_cluster(_section(data, "cluster")),
        discovery=_parse_discovery(_section(data, "discovery")),
        kubernetes=_parse_kubernetes(_section(data, "kubernetes")),
    )
