"""Serialise planned Kubernetes objects to YAML manifests."""

from __future__ import annotations

from typing import Iterable

import yaml
from kubernetes import client


def render_manifests(objects: Iterable[object]) -> str:
    """Return ``objects`` as a multi-document YAML string."""

    api = client.ApiClient()
    documents = [api.sanitize_for_serialization(obj) for obj in objects]
    return yaml.safe_dump_all(documents, sort_keys=False)
