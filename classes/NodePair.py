"""
NodePair: Explicit sender/receiver pairing and node placement

Node 2i sends to node 2i+1 on port TRAFFIC_BASE_PORT + i. Nodes sit on a
line along the building's x axis, one NODE_SPACING step apart, starting at
FIRST_NODE_X and moving towards the origin.

Copyright (c) 2025 CDoS Mitigation Study
Licensed under the MIT License
"""

import ipaddress
from dataclasses import dataclass
from typing import List, Tuple
from Config import Config


@dataclass(frozen=True)
class NodePair:
    """
    One traffic flow of the experiment.

    Attributes:
        index: Pair index in [0, node_count / 2)
        sender: Node index of the transmitter (always even)
        receiver: Node index of the dedicated receiver (sender + 1)
        port: UDP port of the flow, unique per pair
        receiver_address: IPv4 address assigned to the receiver's device
        distinguished: True for the pair driven by the first-node load
    """
    index: int
    sender: int
    receiver: int
    port: int
    receiver_address: str
    distinguished: bool = False


def node_address(node: int) -> str:
    """Address the IPv4 helper assigns to `node` (devices are numbered in node order)."""
    base = ipaddress.IPv4Address(Config.NETWORK_BASE)
    return str(base + node + 1)


def distinguished_index(node_count: int) -> int:
    """The distinguished pair is the last one: node_count-2 -> node_count-1."""
    return node_count // 2 - 1


def build_pairs(node_count: int) -> List[NodePair]:
    first = distinguished_index(node_count)
    pairs = []
    for i in range(node_count // 2):
        pairs.append(NodePair(
            index=i,
            sender=2 * i,
            receiver=2 * i + 1,
            port=Config.TRAFFIC_BASE_PORT + i,
            receiver_address=node_address(2 * i + 1),
            distinguished=(i == first),
        ))
    return pairs


def node_positions(node_count: int) -> List[Tuple[float, float, float]]:
    return [(Config.FIRST_NODE_X - Config.NODE_SPACING * i, Config.NODE_Y, Config.NODE_Z)
            for i in range(node_count)]
