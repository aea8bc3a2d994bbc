"""Runtime helpers for the cluster bootstrap command."""

from .config import BootstrapConfig, load_config  # noqa: F401

__all__ = [
    "BootstrapConfig",
    "load_config",
]
