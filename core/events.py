"""
Simulation Event Schema.

Responsibility boundaries:
- Defines the discrete steps of a propagation run: Init, Advertise, Complete.
- Every event carries a full table snapshot so it can be rendered on its own.

Mutation constraints:
- Events are strictly immutable once produced.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Tuple

from routing.route_table import Tables


class EventKind(Enum):
    INIT = auto()
    ADVERTISE = auto()
    COMPLETE = auto()


@dataclass(frozen=True)
class SimulationEvent(ABC):
    """
    Base for all simulation events. `tables` is a read-only snapshot.
    """
    tables: Tables
    message: str

    @property
    @abstractmethod
    def kind(self) -> EventKind:
        pass

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.name.lower(),
            "message": self.message,
            "tables": {
                node_id: [route.to_dict() for route in routes]
                for node_id, routes in self.tables.items()
            },
        }


@dataclass(frozen=True)
class InitEvent(SimulationEvent):
    """The origin AS announces its prefix."""
    origin_id: int = 0
    prefix: str = ""

    @property
    def kind(self) -> EventKind:
        return EventKind.INIT

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"as_id": self.origin_id, "prefix": self.prefix})
        return data


@dataclass(frozen=True)
class AdvertiseEvent(SimulationEvent):
    """One hop of propagation: `sender_id` advertised `as_path` to `receiver_id`."""
    sender_id: int = 0
    receiver_id: int = 0
    as_path: Tuple[int, ...] = ()
    local_preference: int = 0

    @property
    def kind(self) -> EventKind:
        return EventKind.ADVERTISE

    @property
    def endpoints(self) -> Tuple[int, int]:
        return self.sender_id, self.receiver_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "from": self.sender_id,
            "to": self.receiver_id,
            "path": list(self.as_path),
            "local_pref": self.local_preference,
        })
        return data


@dataclass(frozen=True)
class CompleteEvent(SimulationEvent):
    """Terminal event carrying the observer's selected path (empty when unreachable)."""
    observer_id: int = 0
    final_path: Tuple[int, ...] = ()

    @property
    def kind(self) -> EventKind:
        return EventKind.COMPLETE

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"observer": self.observer_id, "final_path": list(self.final_path)})
        return data
