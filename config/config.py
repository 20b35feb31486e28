"""
Simulation Configuration.

Responsibility boundaries:
- Holds the seed, local preference range and default topology layout.
- Must be passed to initialize systems natively.

Mutation constraints:
- Frozen after initialization to avoid mid-simulation configuration drift.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Tuple


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable container defining overall runtime scenario setup.
    """
    seed: int = 42

    # Local preference: the origin's own route, and the per-advertisement draw range (inclusive)
    origin_local_preference: int = 100
    local_pref_min: int = 100
    local_pref_max: int = 149

    # Default topology: ring of ASes with chords, 0-based indices
    ring_size: int = 6
    ring_chords: Tuple[Tuple[int, int], ...] = ((0, 3), (1, 4), (2, 5))
    ring_radius: float = 180.0
    ring_center: Tuple[float, float] = (400.0, 300.0)

    # Default announcing AS and the AS whose selected path is reported
    origin_id: int = 6
    observer_id: int = 1

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.local_pref_min > self.local_pref_max:
            raise ConfigError(
                f"local_pref_min ({self.local_pref_min}) exceeds local_pref_max ({self.local_pref_max})."
            )
        if self.ring_size < 2:
            raise ConfigError(f"ring_size must be at least 2, got {self.ring_size}.")
        taken = {frozenset((i, (i + 1) % self.ring_size)) for i in range(self.ring_size)}
        for a, b in self.ring_chords:
            if not (0 <= a < self.ring_size and 0 <= b < self.ring_size):
                raise ConfigError(f"Chord ({a}, {b}) is outside a ring of {self.ring_size} nodes.")
            if a == b:
                raise ConfigError(f"Chord ({a}, {b}) is a self-loop.")
            pair = frozenset((a, b))
            if pair in taken:
                raise ConfigError(f"Chord ({a}, {b}) duplicates a ring link or an earlier chord.")
            taken.add(pair)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

        values = dict(data)
        if "ring_chords" in values:
            values["ring_chords"] = tuple(tuple(pair) for pair in values["ring_chords"])
        if "ring_center" in values:
            values["ring_center"] = tuple(values["ring_center"])
        return cls(**values)
