"""
Topology Model.

Responsibility boundaries:
- Owns the ASes and links of the simulated internetwork.
- Maintains Node and Link indices and each node's derived neighbor list.
- Publishes a versioned change notification after every committed mutation.

Mutation constraints:
- Mutated only through its own operations; every operation is all-or-nothing.
- Never mutated while a propagation run is executing.
"""

import ipaddress
import logging
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from topology.link import Link, LinkKey, link_key
from topology.node import Node, Position
from topology.topology_events import ChangeKind, TopologyChange, TopologyListener

logger = logging.getLogger(__name__)


class TopologyError(Exception):
    pass


class InvalidLinkError(TopologyError):
    pass


class LinkNotFoundError(TopologyError):
    pass


class NodeNotFoundError(TopologyError):
    pass


def _prefix_candidates(node_id: int) -> Iterator[str]:
    """Prefixes offered to a new node, most readable first."""
    if 0 < node_id <= 255:
        yield f"10.{node_id}.0.0/16"
    for net in ipaddress.ip_network("172.16.0.0/12").subnets(new_prefix=24):
        yield str(net)
    for net in ipaddress.ip_network("fd00::/8").subnets(new_prefix=64):
        yield str(net)


class TopologyModel:
    """
    Coordinates and maintains the network topology for the simulation.
    """

    def __init__(self) -> None:
        self._nodes: Dict[int, Node] = {}
        # Insertion ordered, so neighbor order follows link creation order
        self._links: Dict[LinkKey, Link] = {}
        self._next_id = 1
        self._version = 0
        self._listeners: List[TopologyListener] = []

    # Change notification

    @property
    def version(self) -> int:
        return self._version

    def subscribe(self, listener: TopologyListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: TopologyListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _commit(self, kind: ChangeKind, *node_ids: int) -> None:
        """
        Publish a change that is already applied. Every listener is called even if an
        earlier one raises; the first error is re-raised afterwards and the mutation stays.
        """
        self._version += 1
        change = TopologyChange(kind, self._version, tuple(node_ids))
        logger.debug("Topology change %s on %s (version %d)", kind.name, node_ids, self._version)
        first_error: Optional[Exception] = None
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                logger.exception("Topology listener failed on %s (version %d)", kind.name, self._version)
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    # Mutations

    def add_node(self, position: Position = (0.0, 0.0)) -> Node:
        node_id = self._next_id
        used = {node.prefix for node in self._nodes.values()}
        prefix = next(p for p in _prefix_candidates(node_id) if p not in used)

        node = Node(node_id, prefix, position=position)
        self._next_id += 1
        self._nodes[node_id] = node
        self._commit(ChangeKind.NODE_ADDED, node_id)
        return node

    def remove_node(self, node_id: int) -> None:
        if node_id not in self._nodes:
            raise NodeNotFoundError(f"Node '{node_id}' not found.")

        # Remove incident links first
        for key in [k for k, link in self._links.items() if link.connects(node_id)]:
            del self._links[key]

        del self._nodes[node_id]
        self._rebuild_neighbors()
        self._commit(ChangeKind.NODE_REMOVED, node_id)

    def rename_node(self, node_id: int, new_label: str) -> None:
        node = self.get_node(node_id)
        label = new_label.strip() if new_label else ""
        if not label or label == node.label:
            return
        node.label = label
        self._commit(ChangeKind.NODE_RENAMED, node_id)

    def move_node(self, node_id: int, position: Position) -> None:
        """Display-only; routing does not depend on positions so no change is published."""
        node = self.get_node(node_id)
        node.position = (float(position[0]), float(position[1]))

    def add_link(self, node_a: int, node_b: int) -> Link:
        if node_a == node_b:
            raise InvalidLinkError(f"Cannot link node '{node_a}' to itself.")
        for node_id in (node_a, node_b):
            if node_id not in self._nodes:
                raise InvalidLinkError(f"Node '{node_id}' not found.")
        key = link_key(node_a, node_b)
        if key in self._links:
            raise InvalidLinkError(f"Link between '{node_a}' and '{node_b}' already exists.")

        link = Link(node_a, node_b)
        self._links[key] = link
        self._rebuild_neighbors()
        self._commit(ChangeKind.LINK_ADDED, node_a, node_b)
        return link

    def remove_link(self, node_a: int, node_b: int) -> None:
        key = link_key(node_a, node_b)
        if key not in self._links:
            raise LinkNotFoundError(f"Link between '{node_a}' and '{node_b}' does not exist.")
        del self._links[key]
        self._rebuild_neighbors()
        self._commit(ChangeKind.LINK_REMOVED, node_a, node_b)

    def toggle_link(self, node_a: int, node_b: int) -> bool:
        """Flip a link between enabled and disabled; returns the new state."""
        link = self._require_link(node_a, node_b)
        link.enabled = not link.enabled
        self._commit(ChangeKind.LINK_TOGGLED, node_a, node_b)
        return link.enabled

    def set_link_enabled(self, node_a: int, node_b: int, enabled: bool) -> None:
        link = self._require_link(node_a, node_b)
        if link.enabled == enabled:
            return
        link.enabled = enabled
        self._commit(ChangeKind.LINK_TOGGLED, node_a, node_b)

    def _require_link(self, node_a: int, node_b: int) -> Link:
        link = self._links.get(link_key(node_a, node_b))
        if link is None:
            raise LinkNotFoundError(f"Link between '{node_a}' and '{node_b}' does not exist.")
        return link

    def _rebuild_neighbors(self) -> None:
        neighbors: Dict[int, List[int]] = {node_id: [] for node_id in self._nodes}
        for link in self._links.values():
            a, b = link.endpoints
            neighbors[a].append(b)
            neighbors[b].append(a)
        for node_id, node in self._nodes.items():
            node._neighbor_ids = tuple(neighbors[node_id])

    # Read-only graph view

    def has_node(self, node_id: int) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: int) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(f"Node '{node_id}' not found.")
        return node

    def nodes(self) -> List[Node]:
        """Return a copy of the list of all nodes, in creation order."""
        return list(self._nodes.values())

    def node_ids(self) -> List[int]:
        return list(self._nodes.keys())

    def neighbors_of(self, node_id: int) -> Tuple[int, ...]:
        return self.get_node(node_id).neighbor_ids

    def links(self) -> List[Link]:
        return list(self._links.values())

    def get_link(self, node_a: int, node_b: int) -> Optional[Link]:
        return self._links.get(link_key(node_a, node_b))

    def is_link_enabled(self, node_a: int, node_b: int) -> bool:
        """False for disabled links and for pairs that are not linked at all."""
        link = self.get_link(node_a, node_b)
        return link is not None and link.enabled

    def disabled_links(self) -> FrozenSet[LinkKey]:
        return frozenset(key for key, link in self._links.items() if not link.enabled)

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    def number_of_links(self) -> int:
        return len(self._links)

    def enabled_links_within(self, node_ids: Iterable[int]) -> int:
        """Count enabled links with both endpoints inside `node_ids`."""
        members = set(node_ids)
        return sum(
            1 for link in self._links.values()
            if link.enabled and set(link.endpoints) <= members
        )

    def __repr__(self) -> str:
        return (f"TopologyModel(nodes={self.number_of_nodes()}, links={self.number_of_links()}, "
                f"version={self._version})")
