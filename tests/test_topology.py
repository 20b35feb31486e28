"""
Topology Model tests: node/link lifecycle, errors and change notification.
"""

import sys
import os

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from config.config import SimulationConfig
from topology.builders import build_default_topology, build_ring_topology
from topology.topology_events import ChangeKind
from topology.topology_model import (
    InvalidLinkError,
    LinkNotFoundError,
    NodeNotFoundError,
    TopologyModel,
)


def _three_nodes():
    topo = TopologyModel()
    for i in range(3):
        topo.add_node((i * 10.0, 0.0))
    return topo


def test_add_node_assigns_ids_labels_and_prefixes():
    topo = TopologyModel()
    first = topo.add_node((1.0, 2.0))
    second = topo.add_node()

    assert (first.node_id, second.node_id) == (1, 2)
    assert first.label == "AS1"
    assert first.prefix == "10.1.0.0/16"
    assert second.prefix == "10.2.0.0/16"
    assert first.position == (1.0, 2.0)
    assert first.neighbor_ids == ()


def test_prefixes_stay_distinct_past_the_readable_range():
    topo = TopologyModel()
    for _ in range(257):
        topo.add_node()

    prefixes = [node.prefix for node in topo.nodes()]
    assert len(set(prefixes)) == len(prefixes)
    assert topo.get_node(255).prefix == "10.255.0.0/16"
    assert topo.get_node(256).prefix == "172.16.0.0/24"
    assert topo.get_node(257).prefix == "172.16.1.0/24"


def test_ids_are_never_reused():
    topo = _three_nodes()
    topo.remove_node(3)
    node = topo.add_node()
    assert node.node_id == 4
    assert not topo.has_node(3)


def test_add_link_updates_neighbors_symmetrically_in_creation_order():
    topo = _three_nodes()
    topo.add_link(1, 2)
    topo.add_link(3, 1)

    assert topo.neighbors_of(1) == (2, 3)
    assert topo.neighbors_of(2) == (1,)
    assert topo.neighbors_of(3) == (1,)
    assert topo.is_link_enabled(2, 1)
    assert topo.get_link(1, 3).link_id == "3-1"


@pytest.mark.parametrize("a, b", [(1, 1), (1, 99), (99, 1)])
def test_add_link_rejects_self_loops_and_unknown_nodes(a, b):
    topo = _three_nodes()
    with pytest.raises(InvalidLinkError):
        topo.add_link(a, b)
    assert topo.number_of_links() == 0


def test_add_link_rejects_duplicates_in_either_direction():
    topo = _three_nodes()
    topo.add_link(1, 2)
    version = topo.version

    with pytest.raises(InvalidLinkError):
        topo.add_link(2, 1)

    assert topo.number_of_links() == 1
    assert topo.version == version
    assert topo.neighbors_of(1) == (2,)


def test_toggle_link_flips_state_from_either_end():
    topo = _three_nodes()
    topo.add_link(1, 2)

    assert topo.toggle_link(2, 1) is False
    assert not topo.is_link_enabled(1, 2)
    assert topo.disabled_links() == {frozenset((1, 2))}
    # Disabled links remain part of the graph
    assert topo.neighbors_of(1) == (2,)

    assert topo.toggle_link(1, 2) is True
    assert topo.disabled_links() == frozenset()


def test_toggle_missing_link_raises():
    topo = _three_nodes()
    with pytest.raises(LinkNotFoundError):
        topo.toggle_link(1, 3)


def test_set_link_enabled_only_notifies_on_change():
    topo = _three_nodes()
    topo.add_link(1, 2)
    version = topo.version

    topo.set_link_enabled(1, 2, True)
    assert topo.version == version

    topo.set_link_enabled(2, 1, False)
    assert topo.version == version + 1
    assert not topo.is_link_enabled(1, 2)


def test_rename_node_trims_and_ignores_blank_labels():
    topo = _three_nodes()
    topo.rename_node(1, "  Transit  ")
    assert topo.get_node(1).label == "Transit"

    version = topo.version
    topo.rename_node(1, "   ")
    topo.rename_node(1, "")
    assert topo.get_node(1).label == "Transit"
    assert topo.version == version

    with pytest.raises(NodeNotFoundError):
        topo.rename_node(42, "ghost")


def test_remove_node_cascades_links():
    topo = _three_nodes()
    topo.add_link(1, 2)
    topo.add_link(2, 3)
    topo.add_link(1, 3)

    topo.remove_node(2)

    assert topo.number_of_nodes() == 2
    assert topo.number_of_links() == 1
    assert topo.neighbors_of(1) == (3,)
    assert topo.neighbors_of(3) == (1,)
    with pytest.raises(NodeNotFoundError):
        topo.remove_node(2)


def test_remove_link():
    topo = _three_nodes()
    topo.add_link(1, 2)
    topo.remove_link(2, 1)
    assert topo.number_of_links() == 0
    assert topo.neighbors_of(1) == ()
    with pytest.raises(LinkNotFoundError):
        topo.remove_link(1, 2)


def test_move_node_does_not_publish_a_change():
    topo = _three_nodes()
    seen = []
    topo.subscribe(seen.append)
    topo.move_node(1, (5, 6))
    assert topo.get_node(1).position == (5.0, 6.0)
    assert seen == []


def test_listeners_receive_versioned_changes():
    topo = TopologyModel()
    seen = []
    topo.subscribe(seen.append)

    topo.add_node()
    topo.add_node()
    topo.add_link(1, 2)
    topo.toggle_link(1, 2)
    topo.rename_node(2, "Edge")

    assert [c.kind for c in seen] == [
        ChangeKind.NODE_ADDED,
        ChangeKind.NODE_ADDED,
        ChangeKind.LINK_ADDED,
        ChangeKind.LINK_TOGGLED,
        ChangeKind.NODE_RENAMED,
    ]
    assert [c.version for c in seen] == [1, 2, 3, 4, 5]
    assert seen[2].node_ids == (1, 2)

    topo.unsubscribe(seen.append)
    topo.add_node()
    assert len(seen) == 5


def test_ring_builder_layout():
    topo = build_ring_topology(6, [(0, 3), (1, 4)])

    assert topo.number_of_nodes() == 6
    assert topo.number_of_links() == 8
    assert topo.neighbors_of(6) == (5, 1)
    assert topo.neighbors_of(1) == (2, 6, 4)
    # First node sits at the top of the circle
    x, y = topo.get_node(1).position
    assert x == pytest.approx(400.0)
    assert y == pytest.approx(120.0)


def test_default_topology_uses_config_chords():
    topo = build_default_topology(SimulationConfig())
    assert topo.number_of_links() == 9
    assert topo.get_link(3, 6) is not None


def test_failing_listener_does_not_starve_later_listeners():
    topo = TopologyModel()
    seen = []

    def broken(change):
        raise RuntimeError("listener failed")

    topo.subscribe(broken)
    topo.subscribe(seen.append)

    with pytest.raises(RuntimeError):
        topo.add_node()

    # The node is committed and the second listener still heard about it
    assert topo.version == 1
    assert topo.node_ids() == [1]
    assert [c.kind for c in seen] == [ChangeKind.NODE_ADDED]
