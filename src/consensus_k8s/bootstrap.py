"""Cluster bootstrap orchestrator.

This module sequences the individual components: the namespace is ensured,
seed nodes are submitted with no peers, their addresses are discovered once
their pods are running and every remaining node is submitted with the seeds
as its static outbound peers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from kubernetes import client

from .config import ClusterSpec, DiscoverySettings, NodeAddr
from .deployment import build_deployment, deploy_node
from .discovery import SeedDiscoveryPoller
from .namespace import NamespaceProvisioner
from .platform import Platform

LOG = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """What a bootstrap run created and discovered."""

    namespace: str
    deployments: List[str] = field(default_factory=list)
    seed_addresses: Dict[str, str] = field(default_factory=dict)
    peers: List[NodeAddr] = field(default_factory=list)


def seed_peers(seed_addresses: Mapping[str, str], node_port: int) -> List[NodeAddr]:
    """Turn discovered seed IPs into peers, ordered by node id."""

    return [
        NodeAddr(id=node_id, address=f"{ip}:{node_port}")
        for node_id, ip in sorted(seed_addresses.items())
    ]


def _overrides(spec: ClusterSpec) -> dict:
    return {
        "node_port": spec.node_port,
        "image": spec.image,
        "image_pull_policy": spec.image_pull_policy,
    }


def plan(
    spec: ClusterSpec, peers: Optional[Sequence[NodeAddr]] = None
) -> List[client.V1Deployment]:
    """Return the Deployments a bootstrap would submit, without submitting.

    Without ``peers`` only the seed Deployments can be planned, since regular
    nodes depend on addresses that exist only once the seeds are running.
    """

    deployments = [
        build_deployment(index, True, [], spec.namespace, **_overrides(spec))
        for index in spec.seed_indices()
    ]
    if peers is not None:
        deployments.extend(
            build_deployment(index, False, peers, spec.namespace, **_overrides(spec))
            for index in spec.non_seed_indices()
        )
    return deployments


class ClusterBootstrap:
    """Drive a full bootstrap against ``platform``."""

    def __init__(
        self,
        platform: Platform,
        spec: ClusterSpec,
        *,
        discovery: Optional[DiscoverySettings] = None,
        poller: Optional[SeedDiscoveryPoller] = None,
    ) -> None:
        settings = discovery or DiscoverySettings()
        self._platform = platform
        self._spec = spec
        self._provisioner = NamespaceProvisioner(platform)
        self._poller = poller or SeedDiscoveryPoller(
            platform,
            attempts=settings.attempts,
            interval=settings.interval,
            require_ready=settings.require_ready,
        )

    def run(self) -> BootstrapResult:
        spec = self._spec
        namespace = self._provisioner.ensure(spec.namespace)
        result = BootstrapResult(namespace=namespace)

        for index in spec.seed_indices():
            result.deployments.append(
                deploy_node(self._platform, index, True, [], namespace, **_overrides(spec))
            )

        result.seed_addresses = self._poller.resolve(spec.seeds, namespace)
        result.peers = seed_peers(result.seed_addresses, spec.node_port)
        LOG.info(
            "Seed peers: %s",
            ", ".join(f"{peer.id}={peer.address}" for peer in result.peers),
        )

        for index in spec.non_seed_indices():
            result.deployments.append(
                deploy_node(
                    self._platform, index, False, result.peers, namespace, **_overrides(spec)
                )
            )

        LOG.info(
            "Bootstrapped %d nodes (%d seeds) in namespace %s",
            len(result.deployments),
            spec.seeds,
            namespace,
        )
        return result
