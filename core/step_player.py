"""
Step Player.

Responsibility boundaries:
- Replays a propagation run one event at a time on external request.
- Exposes the observable state a presentation layer renders: current tables,
  current message, the advertisement in flight and the highlighted route.
- Acts as the run handle of the simulator's external interface.

Mutation constraints:
- Holds no routing logic; all tables come from the engine's event snapshots.
- Any topology change while a run is prepared discards the run.
"""

import logging
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterable, Optional, Tuple

from core.events import AdvertiseEvent, CompleteEvent, SimulationEvent
from core.propagation_engine import PropagationEngine
from routing.route_table import Tables
from topology.topology_events import TopologyChange
from topology.topology_model import TopologyModel

logger = logging.getLogger(__name__)

IDLE_MESSAGE = "Prepare simulation"


class PlayerState(Enum):
    IDLE = auto()
    READY = auto()
    STEPPING = auto()
    DONE = auto()


class StepPlayer:
    """
    State machine over the event sequence of one propagation run.

    IDLE --prepare()--> READY --next()--> STEPPING --next()...--> DONE
    reset() or any topology change returns to IDLE.
    """

    def __init__(self, topology: TopologyModel, engine: PropagationEngine) -> None:
        self._topology = topology
        self._engine = engine
        self._topology.subscribe(self._on_topology_change)
        self._clear()

    def _clear(self) -> None:
        self._state = PlayerState.IDLE
        self._events: Tuple[SimulationEvent, ...] = ()
        self._final_tables: Tables = MappingProxyType({})
        self._cursor = 0
        self._prepared_version: Optional[int] = None
        self._current_event: Optional[SimulationEvent] = None
        self._current_tables: Tables = MappingProxyType({node_id: () for node_id in self._topology.node_ids()})
        self._packet_in_flight: Optional[Tuple[int, int]] = None
        self._highlighted_route: Tuple[int, ...] = ()

    def _on_topology_change(self, change: TopologyChange) -> None:
        if self._state is not PlayerState.IDLE:
            logger.info("Topology changed (%s, version %d); discarding prepared run",
                        change.kind.name, change.version)
            self._clear()

    def detach(self) -> None:
        """Stop listening to the topology."""
        self._topology.unsubscribe(self._on_topology_change)

    # Transitions

    def prepare(self, disabled_links: Iterable[Iterable[int]], origin_id: int, observer_id: int) -> "StepPlayer":
        if self._state is not PlayerState.IDLE:
            return self

        # Validates both ids before anything is stored
        self._topology.get_node(origin_id)
        self._topology.get_node(observer_id)

        events, tables = self._engine.run(self._topology, disabled_links, origin_id, observer_id)
        self._events = events
        self._final_tables = tables
        self._cursor = 0
        self._prepared_version = self._topology.version
        self._state = PlayerState.READY
        return self

    def next(self) -> Optional[SimulationEvent]:
        if self._state not in (PlayerState.READY, PlayerState.STEPPING):
            return None

        event = self._events[self._cursor]
        self._cursor += 1
        self._apply(event)
        self._state = PlayerState.DONE if self._cursor == len(self._events) else PlayerState.STEPPING
        return event

    def reset(self) -> None:
        self._clear()

    def _apply(self, event: SimulationEvent) -> None:
        self._current_event = event
        self._current_tables = event.tables
        if isinstance(event, AdvertiseEvent):
            self._packet_in_flight = event.endpoints
        else:
            self._packet_in_flight = None
        if isinstance(event, CompleteEvent):
            self._highlighted_route = event.final_path

    # Observable state

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def total_steps(self) -> int:
        return len(self._events)

    @property
    def events(self) -> Tuple[SimulationEvent, ...]:
        return self._events

    @property
    def final_tables(self) -> Tables:
        return self._final_tables

    @property
    def current_event(self) -> Optional[SimulationEvent]:
        return self._current_event

    @property
    def current_message(self) -> str:
        return self._current_event.message if self._current_event is not None else IDLE_MESSAGE

    @property
    def packet_in_flight(self) -> Optional[Tuple[int, int]]:
        """(sender, receiver) of the Advertise event just applied, for animation."""
        return self._packet_in_flight

    @property
    def highlighted_route(self) -> Tuple[int, ...]:
        return self._highlighted_route

    @property
    def prepared_version(self) -> Optional[int]:
        """Topology version the stored run was computed against."""
        return self._prepared_version

    def current_tables(self) -> Tables:
        return dict(self._current_tables)


# Handle-style interface for presentation collaborators

def prepare(
    topology: TopologyModel,
    engine: PropagationEngine,
    disabled_links: Iterable[Iterable[int]],
    origin_id: int,
    observer_id: int,
) -> StepPlayer:
    """Create a run handle and prepare it; raises NodeNotFoundError for unknown ids."""
    return StepPlayer(topology, engine).prepare(disabled_links, origin_id, observer_id)


def next_event(handle: StepPlayer) -> Optional[SimulationEvent]:
    """The next event, or None once the run is done."""
    return handle.next()


def current_tables(handle: StepPlayer) -> Tables:
    return handle.current_tables()


def reset(handle: StepPlayer) -> None:
    handle.reset()
