"""Entry point for the consensus cluster bootstrap tool."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from consensus_k8s import BootstrapError, ClusterBootstrap
from consensus_k8s.bootstrap import plan
from consensus_k8s.namespace import namespace_manifest
from consensus_k8s.platform import KubernetesPlatform, load_kube_client

from .config import load_config
from .render import render_manifests

LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bootstrap a consensus test cluster on Kubernetes"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("cluster.yaml"),
        help="Path to the cluster configuration file",
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        help="Kubeconfig file to use instead of the configured one",
    )
    parser.add_argument(
        "--context",
        help="Kubeconfig context to use instead of the configured one",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the namespace and seed manifests without contacting the cluster",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        LOG.error("invalid configuration %s: %s", args.config, exc)
        return 1
    spec = config.cluster

    if args.dry_run:
        objects = [namespace_manifest(spec.namespace), *plan(spec)]
        sys.stdout.write(render_manifests(objects))
        LOG.info(
            "dry run: %d seed manifests rendered, %d regular nodes depend on seed discovery",
            spec.seeds,
            spec.nodes - spec.seeds,
        )
        return 0

    kubeconfig = args.kubeconfig or config.kubernetes.kubeconfig
    context = args.context or config.kubernetes.context

    try:
        api_client = load_kube_client(
            str(kubeconfig) if kubeconfig else None, context
        )
        bootstrap = ClusterBootstrap(
            KubernetesPlatform(api_client), spec, discovery=config.discovery
        )
        result = bootstrap.run()
    except BootstrapError as exc:
        LOG.error("bootstrap failed: %s", exc)
        return 1

    for node_id, address in sorted(result.seed_addresses.items()):
        LOG.info("seed %s at %s", node_id, address)
    LOG.info("bootstrap of namespace %s complete", result.namespace)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
