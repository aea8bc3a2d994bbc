#!/usr/bin/env python3
"""Render the consensus cluster manifests without a running cluster.

Seed addresses are normally discovered at bootstrap time. Passing them with
``--seed-address`` lets the regular nodes be rendered too, which is handy for
reviewing the generated arguments or applying them by hand.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Sequence

REPO_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from consensus_k8s.bootstrap import plan, seed_peers  # noqa: E402
from consensus_k8s.namespace import namespace_manifest  # noqa: E402
from k8s_bootstrap.config import load_config  # noqa: E402
from k8s_bootstrap.render import render_manifests  # noqa: E402


LOG = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("deploy/cluster.yaml"),
        help="Path to the cluster configuration file",
    )
    parser.add_argument(
        "--seed-address",
        action="append",
        default=[],
        metavar="ID=IP",
        help="Known seed pod address, may be repeated",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("deploy/manifests"),
        help="Directory where cluster.yaml will be written",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args()


def parse_seed_addresses(values: Sequence[str]) -> Dict[str, str]:
    addresses: Dict[str, str] = {}
    for value in values:
        node_id, sep, ip = value.partition("=")
        if not sep or not node_id or not ip:
            raise ValueError(f"Invalid seed address '{value}', expected ID=IP")
        addresses[node_id] = ip
    return addresses


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config)
    spec = config.cluster
    addresses = parse_seed_addresses(args.seed_address)

    peers = None
    if addresses:
        if len(addresses) != spec.seeds:
            LOG.warning(
                "%d seed addresses given for %d seeds", len(addresses), spec.seeds
            )
        peers = seed_peers(addresses, spec.node_port)
    else:
        LOG.warning("No seed addresses given, rendering seed nodes only")

    objects = [namespace_manifest(spec.namespace), *plan(spec, peers)]

    args.output_dir.mkdir(parents=True, exist_ok=True)
    output_path = args.output_dir / "cluster.yaml"
    output_path.write_text(render_manifests(objects))
    LOG.info("Rendered %d manifests to %s", len(objects), output_path)


if __name__ == "__main__":
    main()
