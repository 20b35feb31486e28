"""
Route Table Encoder.

Responsibility boundaries:
- Converts routing table snapshots into fixed-size numeric vectors.
- Suitable for plotting convergence or comparing runs numerically.
- Only encodes what is in the snapshot; never looks at the live topology.
"""

import numpy as np

from config.config import SimulationConfig
from routing.route_table import Tables, selected_route


class TableEncoder:
    """
    Encoder for converting table snapshots into fixed-dimensional arrays.
    """

    def __init__(self, max_nodes: int = 32, max_routes: int = 8, config: SimulationConfig = None):
        self.max_nodes = max_nodes
        self.max_routes = max_routes
        config = config if config is not None else SimulationConfig()
        self._pref_floor = min(config.origin_local_preference, config.local_pref_min)
        self._pref_span = max(config.local_pref_max - self._pref_floor, 1)

        # NODE_FEATURE_DIM = 1 (has route) + 1 (route count) + 1 (path length) + 1 (local pref) + 1 (is origin) = 5
        self.node_feature_dim = 5

    def encode(self, tables: Tables) -> np.ndarray:
        """
        Encodes a table snapshot into a flattened numpy array.

        Output shape: [MAX_NODES * NODE_FEATURE_DIM]
        """
        node_matrix = np.zeros((self.max_nodes, self.node_feature_dim), dtype=np.float32)

        # Deterministic slot assignment by ID
        for i, node_id in enumerate(sorted(tables)):
            if i >= self.max_nodes:
                break

            routes = tables[node_id]
            if not routes:
                continue

            # [0] has_route
            node_matrix[i, 0] = 1.0

            # [1] route_count, normalized
            node_matrix[i, 1] = min(len(routes) / self.max_routes, 1.0)

            best = selected_route(tables, node_id)
            if best is None:
                continue

            # [2] selected path length, normalized
            node_matrix[i, 2] = min(best.path_length / self.max_nodes, 1.0)

            # [3] selected local preference, scaled into [0, 1]
            node_matrix[i, 3] = (best.local_preference - self._pref_floor) / self._pref_span

            # [4] is_origin (holds its own announcement as best)
            node_matrix[i, 4] = 1.0 if best.path_length == 1 else 0.0

        return node_matrix.flatten()

    def path_lengths(self, tables: Tables) -> np.ndarray:
        """Selected AS path length per slot; 0 marks an AS without a selected route."""
        lengths = np.zeros(self.max_nodes, dtype=np.int64)
        for i, node_id in enumerate(sorted(tables)[:self.max_nodes]):
            best = selected_route(tables, node_id)
            if best is not None:
                lengths[i] = best.path_length
        return lengths

    @property
    def observation_dim(self) -> int:
        return self.max_nodes * self.node_feature_dim
