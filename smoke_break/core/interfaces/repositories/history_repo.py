"""Repository interface for the history blob."""

from __future__ import annotations

import abc
from typing import List, Protocol

from smoke_break.core.entities.history_record import HistoryRecord


class AbstractHistoryRepository(Protocol):
    """Contract for persisting the ordered ledger sequence (newest first)."""

    @abc.abstractmethod
    def load(self) -> List[HistoryRecord] | None:
        """Return stored records, ``None`` when nothing was ever saved.

        Raises CorruptDataError for undecodable payloads and
        PersistenceError for storage failures.
        """

    @abc.abstractmethod
    def save(self, records: List[HistoryRecord]) -> None: ...
