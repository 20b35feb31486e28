"""
Route Entity.

Responsibility boundaries:
- One path learned by one AS towards a destination prefix.

Mutation constraints:
- Immutable. Best-path selection produces flagged copies instead of editing routes.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Route:
    """
    A learned route. `as_path` is nearest-first: the AS holding the route,
    then each hop back towards the origin, which is always last.
    """
    destination_prefix: str
    as_path: Tuple[int, ...]
    local_preference: int
    selected: bool = False

    def __post_init__(self) -> None:
        if not self.as_path:
            raise ValueError("A route needs a non-empty AS path.")
        object.__setattr__(self, "as_path", tuple(self.as_path))

    @property
    def origin_id(self) -> int:
        return self.as_path[-1]

    @property
    def path_length(self) -> int:
        return len(self.as_path)

    def with_selected(self, selected: bool) -> "Route":
        return self if self.selected == selected else replace(self, selected=selected)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "destination": self.destination_prefix,
            "as_path": list(self.as_path),
            "local_pref": self.local_preference,
            "selected": self.selected,
        }
