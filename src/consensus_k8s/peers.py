"""Encode peer addresses into the node's command line arguments."""

from __future__ import annotations

import json
from typing import List, Sequence

from .config import NodeAddr

GOSSIP_STATIC_OUTBOUND_FLAG = "--add-gossip-static-outbound"


def encode_peer_args(peers: Sequence[NodeAddr]) -> List[str]:
    """Return the argument vector that makes a node dial ``peers``.

    Seed nodes get no peers and therefore no flag at all. Otherwise the flag
    is followed by a single JSON array of ``{"id", "address"}`` records in the
    order given, which becomes the dial order on the node.
    """

    if not peers:
        return []
    payload = json.dumps(
        [peer.to_record() for peer in peers], separators=(",", ":")
    )
    return [GOSSIP_STATIC_OUTBOUND_FLAG, payload]


def decode_peer_args(args: Sequence[str]) -> List[NodeAddr]:
    """Inverse of :func:`encode_peer_args`."""

    if not args:
        return []
    if len(args) != 2 or args[0] != GOSSIP_STATIC_OUTBOUND_FLAG:
        raise ValueError(f"unexpected peer arguments: {list(args)!r}")

    records = json.loads(args[1])
    if not isinstance(records, list):
        raise ValueError("peer payload must be a JSON array")

    peers: List[NodeAddr] = []
    for record in records:
        if not isinstance(record, dict) or "id" not in record or "address" not in record:
            raise ValueError(f"invalid peer record: {record!r}")
        peers.append(NodeAddr(id=str(record["id"]), address=str(record["address"])))
    return peers
