"""
Topology Change Events.

Responsibility boundaries:
- Formalizes the change notifications emitted by the TopologyModel,
  such as node joins, link failures and relabels.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Tuple


class ChangeKind(Enum):
    NODE_ADDED = auto()
    NODE_REMOVED = auto()
    NODE_RENAMED = auto()
    LINK_ADDED = auto()
    LINK_REMOVED = auto()
    LINK_TOGGLED = auto()


@dataclass(frozen=True)
class TopologyChange:
    """Immutable notification describing one committed topology mutation."""
    kind: ChangeKind
    version: int
    node_ids: Tuple[int, ...] = ()


TopologyListener = Callable[[TopologyChange], None]
