"""Platform implementation backed by the official Kubernetes client."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from kubernetes import client
from kubernetes import config as kube_config
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from ..errors import AlreadyExistsError, InfrastructureError
from .base import Platform

LOG = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


def load_kube_client(
    kubeconfig: Optional[str] = None, context: Optional[str] = None
) -> client.ApiClient:
    """Build an API client from in-cluster config or a kubeconfig file.

    An explicit ``kubeconfig`` or ``context`` skips the in-cluster attempt.
    """

    if kubeconfig is None and context is None:
        try:
            kube_config.load_incluster_config()
            LOG.debug("using in-cluster Kubernetes configuration")
            return client.ApiClient()
        except kube_config.ConfigException:
            LOG.debug("not running in a cluster, falling back to kubeconfig")

    try:
        kube_config.load_kube_config(config_file=kubeconfig, context=context)
    except (kube_config.ConfigException, OSError) as exc:
        raise InfrastructureError(f"failed to load Kubernetes configuration: {exc}") from exc
    return client.ApiClient()


def _translate(exc: Exception, action: str) -> InfrastructureError:
    if isinstance(exc, ApiException) and exc.status == HTTP_CONFLICT:
        return AlreadyExistsError(f"{action}: already exists")
    if isinstance(exc, ApiException):
        return InfrastructureError(f"{action}: API returned {exc.status} {exc.reason}")
    return InfrastructureError(f"{action}: {exc}")


class KubernetesPlatform(Platform):
    """Wrap ``CoreV1Api`` and ``AppsV1Api`` behind :class:`Platform`."""

    def __init__(
        self,
        api_client: Optional[client.ApiClient] = None,
        *,
        core_api: Optional[client.CoreV1Api] = None,
        apps_api: Optional[client.AppsV1Api] = None,
    ) -> None:
        self._core = core_api or client.CoreV1Api(api_client)
        self._apps = apps_api or client.AppsV1Api(api_client)

    def get_namespace(self, name: str) -> Optional[client.V1Namespace]:
        try:
            return self._core.read_namespace(name)
        except ApiException as exc:
            if exc.status == HTTP_NOT_FOUND:
                return None
            raise _translate(exc, f"read namespace {name}") from exc
        except HTTPError as exc:
            raise _translate(exc, f"read namespace {name}") from exc

    def create_namespace(self, body: client.V1Namespace) -> client.V1Namespace:
        try:
            return self._core.create_namespace(body)
        except (ApiException, HTTPError) as exc:
            raise _translate(exc, f"create namespace {body.metadata.name}") from exc

    def create_deployment(
        self, namespace: str, body: client.V1Deployment
    ) -> client.V1Deployment:
        try:
            return self._apps.create_namespaced_deployment(namespace, body)
        except (ApiException, HTTPError) as exc:
            raise _translate(
                exc, f"create deployment {namespace}/{body.metadata.name}"
            ) from exc

    def list_pods(self, namespace: str, label_selector: str) -> Sequence[client.V1Pod]:
        try:
            result = self._core.list_namespaced_pod(
                namespace, label_selector=label_selector
            )
        except (ApiException, HTTPError) as exc:
            raise _translate(exc, f"list pods in {namespace}") from exc
        return list(result.items or [])
