"""Platform adapters used by the bootstrap components."""

from .base import Platform  # noqa: F401
from .kube import KubernetesPlatform, load_kube_client  # noqa: F401

__all__ = [
    "KubernetesPlatform",
    "Platform",
    "load_kube_client",
]
