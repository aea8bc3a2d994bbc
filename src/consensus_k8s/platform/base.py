"""Abstract interface over the Kubernetes verbs the bootstrap needs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from kubernetes.client import V1Deployment, V1Namespace, V1Pod


class Platform(ABC):
    """Create/get/list capability set over namespaces, deployments and pods.

    Implementations raise :class:`~consensus_k8s.errors.InfrastructureError`
    for any communication failure and
    :class:`~consensus_k8s.errors.AlreadyExistsError` when a create call
    conflicts with an existing object.
    """

    @abstractmethod
    def get_namespace(self, name: str) -> Optional[V1Namespace]:
        """Return the namespace called ``name`` or ``None`` if it is absent."""

    @abstractmethod
    def create_namespace(self, body: V1Namespace) -> V1Namespace:
        """Create ``body`` and return the object stored by the API."""

    @abstractmethod
    def create_deployment(self, namespace: str, body: V1Deployment) -> V1Deployment:
        """Create ``body`` in ``namespace`` and return the stored object."""

    @abstractmethod
    def list_pods(self, namespace: str, label_selector: str) -> Sequence[V1Pod]:
        """List pods in ``namespace`` matching ``label_selector``."""
