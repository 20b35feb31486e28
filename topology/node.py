"""
Autonomous System Node Entity.

Responsibility boundaries:
- Represents an identifiable AS in the topology.
- Identity and originated prefix are immutable; the label and position are not.

Mutation constraints:
- `neighbor_ids` is derived from links and only rewritten by the TopologyModel.
"""

from typing import Any, Tuple


Position = Tuple[float, float]


class Node:
    """Autonomous System."""

    def __init__(self, node_id: int, prefix: str, label: str = None, position: Position = (0.0, 0.0)):
        if node_id <= 0:
            raise ValueError(f"Node ids must be positive integers, got {node_id}")

        self._node_id = node_id
        self._prefix = prefix
        self.label = label if label is not None else f"AS{node_id}"
        self.position = (float(position[0]), float(position[1]))
        self._neighbor_ids: Tuple[int, ...] = ()

    @property
    def node_id(self) -> int:
        return self._node_id

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def neighbor_ids(self) -> Tuple[int, ...]:
        return self._neighbor_ids

    def __hash__(self) -> int:
        return hash(self._node_id)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Node):
            return False
        return self._node_id == other.node_id

    def __repr__(self) -> str:
        return f"Node(id={self._node_id}, label={self.label}, prefix={self._prefix})"
