"""Configuration data structures and constants for the cluster bootstrap.

The dataclasses here are deliberately free of any Kubernetes client types so
the runtime configuration loader and the manifest renderer can share them
without talking to a cluster.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

# Primary gossip/consensus port of every node.
NODES_PORT = 3054
# Secondary port serving the node's status endpoint.
STATUS_PORT = 3154
HEALTH_PATH = "/health"

NODE_IMAGE = "consensus-node"
NODE_IMAGE_PULL_POLICY = "Never"
NODE_ENTRYPOINT = "./k8s_entrypoint.sh"

# Node names are zero-padded to two digits.
MAX_NODES = 100

SEED_SELECTOR = "seed=true"

DISCOVERY_ATTEMPTS = 15
DISCOVERY_INTERVAL = 1.0


@dataclass(frozen=True)
class NodeAddr:
    """Address at which a node can be dialled.

    Attributes
    ----------
    id:
        Node identifier, e.g. ``consensus-node-00``.
    address:
        ``host:port`` string the node is reachable at.
    """

    id: str
    address: str

    def to_record(self) -> dict:
        return {"id": self.id, "address": self.address}


@dataclass(frozen=True)
class ClusterSpec:
    """Shape of the cluster to bootstrap.

    Seed nodes occupy indices ``0..seeds-1``; the remaining indices up to
    ``nodes - 1`` are regular nodes that dial the seeds.
    """

    namespace: str
    nodes: int
    seeds: int = 1
    node_port: int = NODES_PORT
    image: str = NODE_IMAGE
    image_pull_policy: str = NODE_IMAGE_PULL_POLICY

    def __post_init__(self) -> None:
        if not self.namespace:
            raise ValueError("namespace cannot be empty")
        if not 1 <= self.nodes <= MAX_NODES:
            raise ValueError(
                f"'nodes' must be between 1 and {MAX_NODES}, got {self.nodes}"
            )
        if not 1 <= self.seeds <= self.nodes:
            raise ValueError(
                f"'seeds' must be between 1 and {self.nodes}, got {self.seeds}"
            )

    def seed_indices(self) -> Sequence[int]:
        return range(self.seeds)

    def non_seed_indices(self) -> Sequence[int]:
        return range(self.seeds, self.nodes)


@dataclass(frozen=True)
class DiscoverySettings:
    """Polling budget used while waiting for seed pods."""

    attempts: int = DISCOVERY_ATTEMPTS
    interval: float = DISCOVERY_INTERVAL
    require_ready: bool = False
