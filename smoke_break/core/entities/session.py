"""Session state of the simulated burn."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from smoke_break.core.entities.history_record import HistoryRecord
from smoke_break.core.entities.item import Item


class SessionPhase(str, enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class SessionState:
    phase: SessionPhase
    progress: float  # 0..100
    item: Item


@dataclass(slots=True)
class CompletionSummary:
    """Transient result of a completed session, shown until the next reset."""

    record: HistoryRecord
    message: str | None = None
    message_ready: bool = False

    @property
    def saved_amount(self) -> float:
        return self.record.saved_amount
