"""
Link Entity.

Responsibility boundaries:
- Represents an undirected adjacency between two `Node`s.
- Carries the enabled/disabled state; a disabled link still exists in the graph.
"""

from typing import FrozenSet, Iterable, Tuple


LinkKey = FrozenSet[int]


def link_key(node_a: int, node_b: int) -> LinkKey:
    """Unordered identity of the link joining two nodes."""
    return frozenset((node_a, node_b))


def normalize_pairs(pairs: Iterable[Iterable[int]]) -> FrozenSet[LinkKey]:
    """Turn an iterable of endpoint pairs, in any order, into link keys."""
    keys = set()
    for pair in pairs:
        a, b = tuple(pair)
        keys.add(link_key(a, b))
    return frozenset(keys)


class Link:
    """Connection between two ASes."""

    def __init__(self, node_a: int, node_b: int, enabled: bool = True):
        if node_a == node_b:
            raise ValueError(f"Self-loops are not allowed: {node_a} - {node_b}")

        self._endpoints = (node_a, node_b)
        self.enabled = enabled

    @property
    def endpoints(self) -> Tuple[int, int]:
        """Endpoints in creation order."""
        return self._endpoints

    @property
    def key(self) -> LinkKey:
        return link_key(*self._endpoints)

    @property
    def link_id(self) -> str:
        return f"{self._endpoints[0]}-{self._endpoints[1]}"

    def connects(self, node_id: int) -> bool:
        return node_id in self._endpoints

    def __repr__(self) -> str:
        return f"Link({self._endpoints[0]} - {self._endpoints[1]}, enabled={self.enabled})"
