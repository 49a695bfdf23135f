"""In-memory repositories, same contracts as the SQLAlchemy ones.

They keep the encoded text rather than objects so a test can plant a
malformed payload, and ``fail_writes`` simulates a broken store.
"""

from __future__ import annotations

from typing import List

from smoke_break.core.entities.history_record import HistoryRecord
from smoke_break.core.entities.reminder_config import ReminderConfig
from smoke_break.core.errors import PersistenceError
from smoke_break.dataproviders.repositories._codec import (
    decode_history,
    decode_settings,
    encode_history,
    encode_settings,
)


class InMemoryHistoryRepository:
    def __init__(self, payload: str | None = None) -> None:
        self.payload = payload
        self.fail_writes = False
        self.saves = 0

    def load(self) -> List[HistoryRecord] | None:
        if self.payload is None:
            return None
        return decode_history(self.payload)

    def save(self, records: List[HistoryRecord]) -> None:
        if self.fail_writes:
            raise PersistenceError("history store unavailable")
        self.payload = encode_history(records)
        self.saves += 1


class InMemorySettingsRepository:
    def __init__(self, payload: str | None = None) -> None:
        self.payload = payload
        self.fail_writes = False

    def load(self) -> ReminderConfig | None:
        if self.payload is None:
            return None
        return decode_settings(self.payload)

    def save(self, config: ReminderConfig) -> None:
        if self.fail_writes:
            raise PersistenceError("settings store unavailable")
        self.payload = encode_settings(config)
