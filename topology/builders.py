"""
Topology Builders.

Responsibility boundaries:
- Produces ready-made topologies for the simulator and its tests.
- Uses only the public TopologyModel mutation operations.
"""

import math
from typing import Iterable, Tuple

from config.config import SimulationConfig
from topology.topology_model import TopologyModel


def build_ring_topology(
    count: int,
    chords: Iterable[Tuple[int, int]] = (),
    radius: float = 180.0,
    center: Tuple[float, float] = (400.0, 300.0),
) -> TopologyModel:
    """
    Build `count` ASes on a circle, linked as a ring plus extra chord links.

    Chord endpoints are 0-based indices into creation order, so index 0 is AS1.
    The ring links are created first, then the chords, which fixes every
    node's neighbor order.
    """
    topology = TopologyModel()
    cx, cy = center
    node_ids = []
    for i in range(count):
        angle = (i * math.pi * 2) / count - math.pi / 2
        node = topology.add_node((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
        node_ids.append(node.node_id)

    for i in range(count):
        j = (i + 1) % count
        if count == 2 and i == 1:
            break
        topology.add_link(node_ids[i], node_ids[j])

    for a, b in chords:
        topology.add_link(node_ids[a], node_ids[b])

    return topology


def build_default_topology(config: SimulationConfig) -> TopologyModel:
    return build_ring_topology(
        config.ring_size,
        config.ring_chords,
        radius=config.ring_radius,
        center=config.ring_center,
    )
