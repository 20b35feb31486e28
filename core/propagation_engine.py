"""
Propagation Engine.

Responsibility boundaries:
- Floods one origin's prefix breadth-first over the enabled links of a topology.
- Synthesizes a local preference for every advertisement received.
- Runs best-path selection once flooding has finished.
- Produces the ordered event sequence and the final tables.

Mutation constraints:
- The topology is read-only input; the disabled-link set is an overlay, not a mutation.
- The engine exclusively owns its RouteTableStore for the duration of a run.
"""

from collections import deque
from typing import Deque, FrozenSet, Iterable, List, NamedTuple, Tuple

from config.config import SimulationConfig
from core.events import AdvertiseEvent, CompleteEvent, InitEvent, SimulationEvent
from routing.route import Route
from routing.route_table import RouteTableStore, Tables
from topology.link import LinkKey, link_key, normalize_pairs
from topology.topology_model import TopologyModel
from utils.logger import AuditLogger
from utils.rng import CentralizedRNG


class PropagationResult(NamedTuple):
    events: Tuple[SimulationEvent, ...]
    tables: Tables


class PropagationEngine:
    """
    Breadth-first path-vector flooding with per-edge attribute synthesis.
    """

    def __init__(self, rng: CentralizedRNG, config: SimulationConfig = None, audit: AuditLogger = None):
        self._rng = rng
        self._config = config if config is not None else SimulationConfig()
        self._audit = audit if audit is not None else AuditLogger()

    @property
    def audit(self) -> AuditLogger:
        return self._audit

    def run(
        self,
        topology: TopologyModel,
        disabled_links: Iterable[Iterable[int]],
        origin_id: int,
        observer_id: int,
    ) -> PropagationResult:
        """
        1. seed the origin route and emit Init
        2. flood breadth-first, emitting one Advertise per enabled edge traversal
        3. select best paths
        4. emit Complete with the observer's selected path
        """
        origin = topology.get_node(origin_id)
        observer = topology.get_node(observer_id)
        overlay = normalize_pairs(disabled_links)
        prefix = origin.prefix

        self._audit.log_event("run_started", {
            "origin": origin_id,
            "observer": observer_id,
            "prefix": prefix,
            "disabled_links": sorted(tuple(sorted(k)) for k in overlay | topology.disabled_links()),
            "topology_version": topology.version,
        })

        store = RouteTableStore(topology.node_ids())
        events: List[SimulationEvent] = []

        # 1. Origination
        store.install(origin_id, Route(prefix, (origin_id,), self._config.origin_local_preference))
        events.append(InitEvent(
            tables=store.snapshot(),
            message=f"{origin.label} announces prefix {prefix}",
            origin_id=origin_id,
            prefix=prefix,
        ))

        # 2. Flooding; paths in the queue are origin-first
        queue: Deque[Tuple[int, Tuple[int, ...]]] = deque([(origin_id, (origin_id,))])
        visited = {origin_id}

        while queue:
            current_id, path_to_current = queue.popleft()
            sender = topology.get_node(current_id)

            for neighbor_id in sender.neighbor_ids:
                if self._is_blocked(topology, overlay, current_id, neighbor_id):
                    continue

                new_path = path_to_current + (neighbor_id,)
                local_pref = self._draw_local_preference()
                installed = Route(prefix, tuple(reversed(new_path)), local_pref)
                store.install(neighbor_id, installed)

                receiver = topology.get_node(neighbor_id)
                events.append(AdvertiseEvent(
                    tables=store.snapshot(),
                    message=f"{sender.label} advertises route to {receiver.label}",
                    sender_id=current_id,
                    receiver_id=neighbor_id,
                    as_path=installed.as_path,
                    local_preference=local_pref,
                ))

                # Forward only the first time a node learns the route
                if neighbor_id not in visited:
                    visited.add(neighbor_id)
                    queue.append((neighbor_id, new_path))

        # 3. Best-path selection
        store.select_best()

        # 4. Completion
        chosen = store.selected_route(observer_id)
        final_path = chosen.as_path if chosen is not None else ()
        events.append(CompleteEvent(
            tables=store.snapshot(),
            message="Path selection complete",
            observer_id=observer.node_id,
            final_path=final_path,
        ))

        self._audit.log_event("run_completed", {
            "origin": origin_id,
            "observer": observer_id,
            "events": len(events),
            "reached": len(visited),
            "final_path": list(final_path),
        })

        return PropagationResult(tuple(events), store.snapshot())

    def _is_blocked(self, topology: TopologyModel, overlay: FrozenSet[LinkKey], a: int, b: int) -> bool:
        return link_key(a, b) in overlay or not topology.is_link_enabled(a, b)

    def _draw_local_preference(self) -> int:
        return self._rng.randint(self._config.local_pref_min, self._config.local_pref_max)
