"""
Route Table Store.

Responsibility boundaries:
- Per-AS list of learned routes, in discovery order.
- Best-path selection over each table.

Mutation constraints:
- Mutated only by the PropagationEngine during a run.
- Routes are appended, never removed; selection only changes `selected` flags.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from routing.route import Route


Tables = Mapping[int, Tuple[Route, ...]]


def _outranks(candidate: Route, incumbent: Route) -> bool:
    if candidate.local_preference != incumbent.local_preference:
        return candidate.local_preference > incumbent.local_preference
    return candidate.path_length < incumbent.path_length


def _best_index(routes: Sequence[Route]) -> Optional[int]:
    best = None
    for i, route in enumerate(routes):
        if best is None or _outranks(route, routes[best]):
            best = i
    return best


def best_route(routes: Sequence[Route]) -> Optional[Route]:
    """
    Highest local preference, then shortest AS path, then first discovered.
    """
    index = _best_index(routes)
    return None if index is None else routes[index]


class RouteTableStore:
    """
    Routing tables for every AS taking part in a run.
    """

    def __init__(self, node_ids: Iterable[int] = ()) -> None:
        self._tables: Dict[int, List[Route]] = {}
        self.initialize(node_ids)

    def initialize(self, node_ids: Iterable[int]) -> None:
        self._tables = {node_id: [] for node_id in node_ids}

    def install(self, node_id: int, route: Route) -> None:
        self._tables.setdefault(node_id, []).append(route)

    def routes(self, node_id: int) -> Tuple[Route, ...]:
        return tuple(self._tables.get(node_id, ()))

    def route_count(self) -> int:
        return sum(len(routes) for routes in self._tables.values())

    def snapshot(self) -> Tables:
        """Read-only copy of every table. Routes are immutable, so the copy is deep."""
        return MappingProxyType({node_id: tuple(routes) for node_id, routes in self._tables.items()})

    def select_best(self) -> None:
        """Flag exactly one route per non-empty table."""
        for node_id, routes in self._tables.items():
            if not routes:
                continue
            best_index = _best_index(routes)
            self._tables[node_id] = [
                route.with_selected(i == best_index) for i, route in enumerate(routes)
            ]

    def selected_route(self, node_id: int) -> Optional[Route]:
        return selected_route(self.snapshot(), node_id)


def selected_route(tables: Tables, node_id: int) -> Optional[Route]:
    """The flagged route of `node_id` in a table snapshot, if any."""
    return next((route for route in tables.get(node_id, ()) if route.selected), None)
