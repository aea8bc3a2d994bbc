"""Deployment synthesis for consensus nodes.

Every node runs as its own single-replica Deployment so the node index maps
one-to-one onto a workload name, a pod label set and a container. The objects
built here are plain ``kubernetes.client`` models; submitting them is left to
:func:`deploy_node` or to the caller.
"""

from __future__ import annotations

import logging
from typing import Sequence

from kubernetes import client

from .config import (
    HEALTH_PATH,
    MAX_NODES,
    NODE_ENTRYPOINT,
    NODE_IMAGE,
    NODE_IMAGE_PULL_POLICY,
    NODES_PORT,
    STATUS_PORT,
    NodeAddr,
)
from .errors import AlreadyExistsError, MalformedResponseError
from .peers import encode_peer_args
from .platform import Platform

LOG = logging.getLogger(__name__)


def node_name(node_index: int) -> str:
    """Return ``consensus-node-NN`` for ``node_index``.

    Indices are limited to ``0..MAX_NODES-1`` so the two digit padding stays
    collision free.
    """

    if node_index < 0 or node_index >= MAX_NODES:
        raise ValueError(
            f"node index {node_index} out of range (0..{MAX_NODES - 1})"
        )
    return f"consensus-node-{node_index:02d}"


def _health_probe() -> client.V1Probe:
    return client.V1Probe(
        http_get=client.V1HTTPGetAction(path=HEALTH_PATH, port=STATUS_PORT)
    )


def _environment(name: str) -> list[client.V1EnvVar]:
    return [
        client.V1EnvVar(name="NODE_ID", value=name),
        # Resolved by the kubelet when the pod starts.
        client.V1EnvVar(
            name="PUBLIC_ADDR",
            value_from=client.V1EnvVarSource(
                field_ref=client.V1ObjectFieldSelector(field_path="status.podIP")
            ),
        ),
    ]


def build_deployment(
    node_index: int,
    is_seed: bool,
    peers: Sequence[NodeAddr],
    namespace: str,
    *,
    node_port: int = NODES_PORT,
    image: str = NODE_IMAGE,
    image_pull_policy: str = NODE_IMAGE_PULL_POLICY,
) -> client.V1Deployment:
    """Build the Deployment for one node without contacting the cluster."""

    name = node_name(node_index)
    labels = {
        "app": name,
        "id": name,
        "seed": str(is_seed).lower(),
    }

    container = client.V1Container(
        name=name,
        image=image,
        image_pull_policy=image_pull_policy,
        command=[NODE_ENTRYPOINT],
        args=encode_peer_args(peers),
        env=_environment(name),
        ports=[
            client.V1ContainerPort(container_port=node_port),
            client.V1ContainerPort(container_port=STATUS_PORT),
        ],
        liveness_probe=_health_probe(),
        readiness_probe=_health_probe(),
    )

    return client.V1Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        spec=client.V1DeploymentSpec(
            replicas=1,
            selector=client.V1LabelSelector(match_labels={"app": name}),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels=labels),
                spec=client.V1PodSpec(containers=[container]),
            ),
        ),
    )


def deploy_node(
    platform: Platform,
    node_index: int,
    is_seed: bool,
    peers: Sequence[NodeAddr],
    namespace: str,
    **overrides,
) -> str:
    """Build and submit the Deployment for one node, returning its name."""

    deployment = build_deployment(node_index, is_seed, peers, namespace, **overrides)
    try:
        result = platform.create_deployment(namespace, deployment)
    except AlreadyExistsError:
        # Left over from an earlier, partially completed bootstrap.
        LOG.info("Deployment %s already exists", deployment.metadata.name)
        return deployment.metadata.name

    name = result.metadata.name if result.metadata else None
    if not name:
        raise MalformedResponseError("Name not defined in deployment metadata")
    LOG.info("Deployment %s created (seed=%s, peers=%d)", name, is_seed, len(peers))
    return name
