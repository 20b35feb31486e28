"""
Audit Logger.

Responsibility boundaries:
- Handles structured event logging for propagation runs.
- Writes immutable records that can be inspected after a run.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class AuditRecord:
    """A single immutable audit entry."""
    event_type: str
    data: Mapping[str, Any]


class AuditLogger:
    """
    A centralized logger for audit and replay purposes.
    """

    def __init__(self, name: str = "bgp_sim.audit", logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger(name)
        self._records: List[AuditRecord] = []

    def log_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Log a specific event.

        Args:
            event_type: The category of the event.
            data: The event payload.
        """
        record = AuditRecord(event_type, MappingProxyType(dict(data)))
        self._records.append(record)
        self._logger.debug("%s %s", event_type, dict(data))

    def records(self, event_type: Optional[str] = None) -> Tuple[AuditRecord, ...]:
        if event_type is None:
            return tuple(self._records)
        return tuple(r for r in self._records if r.event_type == event_type)
