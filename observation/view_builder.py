"""
View Builder.

Responsibility boundaries:
- Constructs the presentation-facing view of a topology and a step player.
- Everything a renderer needs: nodes, links, tables, message, animation hints.

Mutation constraints:
- Produces entirely new output dicts. No references to live topology or player state.
"""

from typing import Any, Dict, List, Sequence, Set

from core.step_player import StepPlayer
from routing.route_table import selected_route
from topology.link import LinkKey, link_key
from topology.topology_model import TopologyModel


def route_link_keys(route: Sequence[int]) -> Set[LinkKey]:
    """Links traversed by consecutive hops of an AS path."""
    return {link_key(a, b) for a, b in zip(route, route[1:])}


class ViewBuilder:
    """
    Builds renderer-neutral snapshots of the simulation.
    """

    def build_view(self, topology: TopologyModel, player: StepPlayer) -> Dict[str, Any]:
        """
        Args:
            topology: The live topology.
            player: The step player whose current state should be shown.

        Returns:
            A plain dictionary describing what to draw.
        """
        tables = player.current_tables()
        highlighted = route_link_keys(player.highlighted_route)

        nodes_info: List[Dict[str, Any]] = []
        for node in topology.nodes():
            best = selected_route(tables, node.node_id)
            nodes_info.append({
                "node_id": node.node_id,
                "label": node.label,
                "prefix": node.prefix,
                "position": node.position,
                "neighbors": list(node.neighbor_ids),
                "route_count": len(tables.get(node.node_id, ())),
                "selected_path": list(best.as_path) if best is not None else [],
            })

        links_info = []
        for link in topology.links():
            a, b = link.endpoints
            links_info.append({
                "link_id": link.link_id,
                "source": a,
                "target": b,
                "enabled": link.enabled,
                "highlighted": link.key in highlighted,
            })

        packet = player.packet_in_flight
        return {
            "state": player.state.name,
            "step": player.cursor,
            "total_steps": player.total_steps,
            "message": player.current_message,
            "nodes": nodes_info,
            "links": links_info,
            "tables": {
                node_id: [route.to_dict() for route in routes]
                for node_id, routes in tables.items()
            },
            "packet": {"from": packet[0], "to": packet[1]} if packet is not None else None,
            "highlighted_route": list(player.highlighted_route),
        }
