"""Bootstrap a consensus test cluster on Kubernetes.

The package keeps the cluster shape, the Deployment synthesis and the seed
discovery logic independent from the command line runtime so they can be
unit tested against an in-memory platform. It provides:

* :func:`~consensus_k8s.deployment.build_deployment`, which renders one
  single-replica Deployment per node with its identity, role and peers;
* :class:`~consensus_k8s.namespace.NamespaceProvisioner`, an idempotent
  create-or-reuse for the target namespace;
* :class:`~consensus_k8s.discovery.SeedDiscoveryPoller`, which waits for the
  seed pods to run and maps their ids to pod IPs; and
* :class:`~consensus_k8s.bootstrap.ClusterBootstrap`, which sequences the
  above against a :class:`~consensus_k8s.platform.Platform`.
"""

from .bootstrap import BootstrapResult, ClusterBootstrap  # noqa: F401
from .config import ClusterSpec, DiscoverySettings, NodeAddr  # noqa: F401
from .errors import (  # noqa: F401
    AlreadyExistsError,
    BootstrapError,
    InfrastructureError,
    MalformedResponseError,
    PodsNotReadyError,
)

__all__ = [
    "AlreadyExistsError",
    "BootstrapError",
    "BootstrapResult",
    "ClusterBootstrap",
    "ClusterSpec",
    "DiscoverySettings",
    "InfrastructureError",
    "MalformedResponseError",
    "NodeAddr",
    "PodsNotReadyError",
]
