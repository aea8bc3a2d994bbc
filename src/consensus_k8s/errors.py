"""Error taxonomy shared by the bootstrap components."""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for every failure raised while bootstrapping a cluster."""


class InfrastructureError(BootstrapError):
    """Communication with the Kubernetes API failed (network, auth, rejection)."""


class AlreadyExistsError(InfrastructureError):
    """The API rejected a create call because the object already exists."""


class MalformedResponseError(BootstrapError):
    """The API returned an object missing a field we depend on."""


class PodsNotReadyError(BootstrapError):
    """Seed discovery ran out of attempts before the pods were running."""

    def __init__(self, expected: int, attempts: int, observed: int | None = None) -> None:
        self.expected = expected
        self.attempts = attempts
        self.observed = observed
        message = f"Pods are not ready: expected {expected} running seed pods after {attempts} attempts"
        if observed is not None:
            message += f" (last observation: {observed})"
        super().__init__(message)
