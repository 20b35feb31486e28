"""
Simulation Environment.

Responsibility boundaries:
- Holds the global simulation context: config, RNG, topology, engine and player.
- Acts as the main entry point for preparing and stepping a propagation run.
"""

from typing import Any, Dict, Iterable, List, Optional

from config.config import SimulationConfig
from core.events import SimulationEvent
from core.propagation_engine import PropagationEngine
from core.step_player import PlayerState, StepPlayer
from encoding.table_encoder import TableEncoder
from observation.view_builder import ViewBuilder
from topology.builders import build_default_topology
from topology.topology_model import TopologyModel
from utils.logger import AuditLogger
from utils.rng import CentralizedRNG


class SimulationEnvironment:
    """
    Facade wiring a topology to the propagation engine and step player.
    """

    def __init__(self, config: SimulationConfig = None, topology: TopologyModel = None, rng: CentralizedRNG = None):
        self.config = config if config is not None else SimulationConfig()
        self.rng = rng if rng is not None else CentralizedRNG(self.config.seed)
        self.topology = topology if topology is not None else build_default_topology(self.config)
        self.audit = AuditLogger()
        self.engine = PropagationEngine(self.rng, self.config, self.audit)
        self.player = StepPlayer(self.topology, self.engine)
        self._view_builder = ViewBuilder()

    @property
    def state(self) -> PlayerState:
        return self.player.state

    def prepare(
        self,
        origin_id: Optional[int] = None,
        observer_id: Optional[int] = None,
        disabled_links: Iterable[Iterable[int]] = (),
    ) -> StepPlayer:
        """
        Compute a run from `origin_id`, reporting the path chosen by `observer_id`.
        Both default to the configured pair.
        """
        origin_id = self.config.origin_id if origin_id is None else origin_id
        observer_id = self.config.observer_id if observer_id is None else observer_id
        return self.player.prepare(disabled_links, origin_id, observer_id)

    def step(self) -> Optional[SimulationEvent]:
        return self.player.next()

    def run_to_completion(self) -> List[SimulationEvent]:
        """Step through every remaining event of a prepared run."""
        played = []
        event = self.player.next()
        while event is not None:
            played.append(event)
            event = self.player.next()
        return played

    def reset(self) -> None:
        self.player.reset()

    def get_observation(self) -> Dict[str, Any]:
        return self._view_builder.build_view(self.topology, self.player)

    def path_length_summary(self) -> Dict[int, int]:
        """
        Selected AS path length per AS in the currently shown tables, 0 when none is selected.
        """
        tables = self.player.current_tables()
        encoder = TableEncoder(max_nodes=max(len(tables), 1), config=self.config)
        lengths = encoder.path_lengths(tables)
        return {node_id: int(length) for node_id, length in zip(sorted(tables), lengths)}
