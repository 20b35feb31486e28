import sys
import os
import logging

# Add project root to path for imports
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from core.environment import SimulationEnvironment
from core.events import AdvertiseEvent, CompleteEvent


def main() -> None:
    """
    Entry point for the BGP route propagation simulator.
    Plays the default scenario (AS6 announces, AS1 observes) to completion.
    """
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    env = SimulationEnvironment()
    env.prepare()
    print(f"Prepared {env.player.total_steps} steps on {env.topology}")

    event = env.step()
    while event is not None:
        line = f"[{env.player.cursor:>3}/{env.player.total_steps}] {event.message}"
        if isinstance(event, AdvertiseEvent):
            line += f"  path={list(event.as_path)} local_pref={event.local_preference}"
        print(line)
        if isinstance(event, CompleteEvent):
            print(f"Selected path for AS{event.observer_id}: {list(event.final_path)}")
        event = env.step()

    print("\nFinal routing tables:")
    for node_id, routes in sorted(env.player.final_tables.items()):
        label = env.topology.get_node(node_id).label
        for route in routes:
            marker = "*" if route.selected else " "
            print(f"  {label:<6} {marker} {route.destination_prefix:<14} "
                  f"path={list(route.as_path)} local_pref={route.local_preference}")

    print("\nSelected path lengths:")
    for node_id, length in env.path_length_summary().items():
        label = env.topology.get_node(node_id).label
        print(f"  {label:<6} {length if length else 'unreachable'}")


if __name__ == "__main__":
    main()
