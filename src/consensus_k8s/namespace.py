"""Idempotent namespace provisioning."""

from __future__ import annotations

import logging

from kubernetes import client

from .errors import AlreadyExistsError, InfrastructureError, MalformedResponseError
from .platform import Platform

LOG = logging.getLogger(__name__)


def namespace_manifest(name: str) -> client.V1Namespace:
    return client.V1Namespace(
        api_version="v1",
        kind="Namespace",
        metadata=client.V1ObjectMeta(name=name, labels={"name": name}),
    )


def _name_of(namespace: client.V1Namespace) -> str:
    name = namespace.metadata.name if namespace.metadata else None
    if not name:
        raise MalformedResponseError("Name not defined in namespace metadata")
    return name


class NamespaceProvisioner:
    """Create a namespace unless it already exists.

    The existence check and the create call are not atomic. A concurrent
    creator winning the race surfaces as a conflict, which is treated as the
    namespace being present.
    """

    def __init__(self, platform: Platform) -> None:
        self._platform = platform

    def ensure(self, name: str) -> str:
        if not name:
            raise ValueError("namespace name cannot be empty")

        existing = self._platform.get_namespace(name)
        if existing is not None:
            LOG.info("Namespace %s already exists", _name_of(existing))
            return name

        try:
            created = self._platform.create_namespace(namespace_manifest(name))
        except AlreadyExistsError:
            LOG.info("Namespace %s was created concurrently, reusing it", name)
            existing = self._platform.get_namespace(name)
            if existing is None:
                raise InfrastructureError(
                    f"namespace {name} reported as existing but cannot be read"
                )
            _name_of(existing)
            return name

        LOG.info("Namespace %s created", _name_of(created))
        return name


def ensure_namespace(platform: Platform, name: str) -> str:
    return NamespaceProvisioner(platform).ensure(name)
