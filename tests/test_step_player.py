"""
Step Player tests: state machine, replay state and invalidation.
"""

import sys
import os

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core import step_player
from core.events import AdvertiseEvent, CompleteEvent, EventKind, InitEvent
from core.propagation_engine import PropagationEngine
from core.step_player import IDLE_MESSAGE, PlayerState, StepPlayer
from topology.builders import build_ring_topology
from topology.topology_model import NodeNotFoundError
from utils.rng import CentralizedRNG


def _player(seed=42):
    topo = build_ring_topology(6, [(0, 3), (1, 4)])
    engine = PropagationEngine(CentralizedRNG(seed))
    return topo, StepPlayer(topo, engine)


def test_starts_idle_and_ignores_next():
    topo, player = _player()
    assert player.state is PlayerState.IDLE
    assert player.next() is None
    assert player.current_message == IDLE_MESSAGE
    assert player.current_tables() == {n: () for n in topo.node_ids()}


def test_prepare_moves_to_ready():
    _, player = _player()
    assert player.prepare((), 6, 1) is player
    assert player.state is PlayerState.READY
    assert player.cursor == 0
    assert player.total_steps == len(player.events) == 18
    # Nothing is applied until the first step
    assert player.current_event is None
    assert player.current_message == IDLE_MESSAGE


def test_stepping_applies_snapshots_and_packet_markers():
    _, player = _player()
    player.prepare((), 6, 1)

    init = player.next()
    assert isinstance(init, InitEvent)
    assert player.state is PlayerState.STEPPING
    assert player.current_tables() == init.tables
    assert player.packet_in_flight is None
    assert player.current_message == "AS6 announces prefix 10.6.0.0/16"

    advert = player.next()
    assert isinstance(advert, AdvertiseEvent)
    assert player.packet_in_flight == (6, 5)
    assert player.current_tables()[5] == advert.tables[5]
    assert player.highlighted_route == ()


def test_runs_through_to_done():
    _, player = _player()
    player.prepare((), 6, 1)

    played = []
    event = player.next()
    while event is not None:
        played.append(event)
        event = player.next()

    assert len(played) == player.total_steps
    assert player.state is PlayerState.DONE
    assert player.cursor == player.total_steps
    last = played[-1]
    assert isinstance(last, CompleteEvent)
    assert player.highlighted_route == last.final_path
    assert player.packet_in_flight is None
    assert player.current_tables() == player.final_tables
    # Guarded at the boundary
    assert player.next() is None
    assert player.cursor == player.total_steps


def test_prepare_is_a_no_op_unless_idle():
    _, player = _player()
    player.prepare((), 6, 1)
    events = player.events
    player.next()

    player.prepare((), 1, 6)
    assert player.events is events
    assert player.state is PlayerState.STEPPING
    assert player.cursor == 1


def test_prepare_rejects_unknown_nodes_without_state_change():
    _, player = _player()
    with pytest.raises(NodeNotFoundError):
        player.prepare((), 99, 1)
    with pytest.raises(NodeNotFoundError):
        player.prepare((), 6, 99)
    assert player.state is PlayerState.IDLE
    assert player.events == ()


def test_reset_clears_everything():
    topo, player = _player()
    player.prepare((), 6, 1)
    for _ in range(player.total_steps):
        player.next()

    player.reset()

    assert player.state is PlayerState.IDLE
    assert player.events == ()
    assert player.final_tables == {}
    assert player.cursor == 0
    assert player.highlighted_route == ()
    assert player.prepared_version is None
    assert player.current_message == IDLE_MESSAGE
    assert player.current_tables() == {n: () for n in topo.node_ids()}


def test_reset_then_prepare_reproduces_run_shape():
    _, player = _player()
    player.prepare([(1, 6)], 6, 1)
    first = [(e.kind, {n: [r.as_path for r in rs] for n, rs in e.tables.items()}) for e in player.events]
    player.next()
    player.reset()

    player.prepare([(1, 6)], 6, 1)
    second = [(e.kind, {n: [r.as_path for r in rs] for n, rs in e.tables.items()}) for e in player.events]

    assert first == second
    assert player.state is PlayerState.READY
    for routes in player.final_tables.values():
        assert sum(r.selected for r in routes) == (1 if routes else 0)


@pytest.mark.parametrize("mutate", [
    lambda t: t.toggle_link(1, 2),
    lambda t: t.rename_node(3, "Core"),
    lambda t: t.add_node(),
    lambda t: t.add_link(3, 6),
    lambda t: t.remove_link(1, 4),
    lambda t: t.remove_node(2),
])
def test_topology_changes_invalidate_the_run(mutate):
    topo, player = _player()
    player.prepare((), 6, 1)
    player.next()

    mutate(topo)

    assert player.state is PlayerState.IDLE
    assert player.events == ()
    assert player.current_tables() == {n: () for n in topo.node_ids()}


def test_moving_a_node_keeps_the_run():
    topo, player = _player()
    player.prepare((), 6, 1)
    topo.move_node(1, (0.0, 0.0))
    assert player.state is PlayerState.READY
    assert player.prepared_version == topo.version


def test_detached_player_ignores_changes():
    topo, player = _player()
    player.prepare((), 6, 1)
    player.detach()
    topo.toggle_link(1, 2)
    assert player.state is PlayerState.READY


def test_handle_interface():
    topo = build_ring_topology(6, [(0, 3), (1, 4)])
    engine = PropagationEngine(CentralizedRNG(1))

    handle = step_player.prepare(topo, engine, [], 6, 1)
    kinds = []
    event = step_player.next_event(handle)
    while event is not None:
        kinds.append(event.kind)
        event = step_player.next_event(handle)

    assert kinds[0] is EventKind.INIT
    assert kinds[-1] is EventKind.COMPLETE
    assert step_player.current_tables(handle) == handle.final_tables

    step_player.reset(handle)
    assert handle.state is PlayerState.IDLE

    with pytest.raises(NodeNotFoundError):
        step_player.prepare(topo, engine, [], 6, 77)


def test_final_tables_and_event_snapshots_are_read_only():
    _, player = _player()
    player.prepare((), 6, 1)
    complete = player.events[-1]
    routes_at_1 = complete.tables[1]

    with pytest.raises(TypeError):
        player.final_tables[1] = ()
    with pytest.raises(TypeError):
        complete.tables[1] = ()
    with pytest.raises(TypeError):
        player.events[0].tables[6] = ()

    assert complete.tables is not player.final_tables
    assert complete.tables[1] == routes_at_1 == player.final_tables[1]


def test_current_tables_copy_does_not_leak_into_events():
    _, player = _player()
    player.prepare((), 6, 1)
    init = player.next()

    shown = player.current_tables()
    shown[6] = ()

    assert init.tables[6] != ()
    assert player.current_tables()[6] == init.tables[6]
