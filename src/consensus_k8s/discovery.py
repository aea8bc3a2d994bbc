"""Seed pod discovery.

Seed Deployments are submitted before anything is known about where their
pods will be scheduled. :class:`SeedDiscoveryPoller` lists the seed pods at a
fixed interval until the expected number of them is running, then harvests
their pod IPs so the remaining nodes can be pointed at them.

The loop is bounded by an attempt budget rather than a deadline: with the
defaults it performs at most 15 list calls, one second apart.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from kubernetes import client

from .config import DISCOVERY_ATTEMPTS, DISCOVERY_INTERVAL, SEED_SELECTOR
from .errors import InfrastructureError, MalformedResponseError, PodsNotReadyError
from .platform import Platform

LOG = logging.getLogger(__name__)

RUNNING_PHASE = "Running"


@dataclass(frozen=True)
class PodObservation:
    """The handful of pod fields discovery looks at."""

    name: Optional[str]
    node_id: Optional[str]
    phase: Optional[str]
    pod_ip: Optional[str]
    ready: bool = False

    @property
    def running(self) -> bool:
        return self.phase == RUNNING_PHASE

    @classmethod
    def from_pod(cls, pod: client.V1Pod) -> "PodObservation":
        metadata = pod.metadata
        labels = (metadata.labels if metadata else None) or {}
        status = pod.status
        ready = False
        if status is not None:
            ready = any(
                cond.type == "Ready" and cond.status == "True"
                for cond in status.conditions or []
            )
        return cls(
            name=metadata.name if metadata else None,
            node_id=labels.get("id"),
            phase=status.phase if status else None,
            pod_ip=status.pod_ip if status else None,
            ready=ready,
        )


class SeedDiscoveryPoller:
    """Resolve the addresses of running seed pods.

    Parameters
    ----------
    platform:
        Source of pod listings.
    attempts:
        Maximum number of list calls.
    interval:
        Seconds to wait between two unsuccessful attempts.
    sleep:
        Injected so tests can observe the waits without sleeping.
    require_ready:
        Additionally wait for each pod's ``Ready`` condition. Off by default,
        in which case the running phase alone gates address harvesting.
    """

    def __init__(
        self,
        platform: Platform,
        *,
        attempts: int = DISCOVERY_ATTEMPTS,
        interval: float = DISCOVERY_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        require_ready: bool = False,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self._platform = platform
        self._attempts = attempts
        self._interval = interval
        self._sleep = sleep
        self._require_ready = require_ready

    def resolve(self, expected_count: int, namespace: str) -> Dict[str, str]:
        """Return ``{node_id: pod_ip}`` for exactly ``expected_count`` seeds."""

        if expected_count < 1:
            raise ValueError("expected_count must be at least 1")

        pods = self._wait_for_seeds(expected_count, namespace)

        addresses: Dict[str, str] = {}
        for pod in pods:
            if not pod.node_id:
                raise MalformedResponseError(f"Pod {pod.name} has no 'id' label")
            if not pod.pod_ip:
                raise MalformedResponseError(
                    f"Pod IP address not present for {pod.node_id}"
                )
            if pod.node_id in addresses:
                raise MalformedResponseError(
                    f"Duplicate seed id label {pod.node_id}"
                )
            addresses[pod.node_id] = pod.pod_ip

        LOG.info("Resolved %d seed node addresses in %s", len(addresses), namespace)
        return addresses

    def _wait_for_seeds(
        self, expected_count: int, namespace: str
    ) -> Sequence[PodObservation]:
        last_error: Optional[InfrastructureError] = None
        observed: Optional[int] = None

        for attempt in range(1, self._attempts + 1):
            try:
                pods = [
                    PodObservation.from_pod(pod)
                    for pod in self._platform.list_pods(namespace, SEED_SELECTOR)
                ]
            except InfrastructureError as exc:
                LOG.warning(
                    "Listing seed pods failed (attempt %d/%d): %s",
                    attempt,
                    self._attempts,
                    exc,
                )
                last_error = exc
            else:
                if self._satisfied(pods, expected_count):
                    LOG.debug("Seed pods ready after %d attempt(s)", attempt)
                    return pods
                observed = sum(1 for pod in pods if self._pod_ready(pod))
                LOG.debug(
                    "Seed pods not ready (attempt %d/%d): %d/%d listed, %d running",
                    attempt,
                    self._attempts,
                    len(pods),
                    expected_count,
                    observed,
                )

            if attempt < self._attempts:
                self._sleep(self._interval)

        LOG.warning(
            "Gave up waiting for %d seed pods in %s after %d attempts",
            expected_count,
            namespace,
            self._attempts,
        )
        raise PodsNotReadyError(
            expected_count, self._attempts, observed
        ) from last_error

    def _pod_ready(self, pod: PodObservation) -> bool:
        if self._require_ready:
            return pod.running and pod.ready
        return pod.running

    def _satisfied(self, pods: Sequence[PodObservation], expected_count: int) -> bool:
        return len(pods) == expected_count and all(self._pod_ready(p) for p in pods)


def get_seed_node_addrs(
    platform: Platform, expected_count: int, namespace: str, **kwargs
) -> Dict[str, str]:
    return SeedDiscoveryPoller(platform, **kwargs).resolve(expected_count, namespace)
