"""SQLAlchemy implementation of the history repository."""

from __future__ import annotations

from typing import List

from smoke_break.core.entities.history_record import HistoryRecord
from smoke_break.core.interfaces.repositories.history_repo import AbstractHistoryRepository
from smoke_break.dataproviders.repositories._codec import HISTORY_KEY, decode_history, encode_history
from smoke_break.dataproviders.repositories.blob_store import SqlAlchemyBlobStore


class SqlAlchemyHistoryRepository(AbstractHistoryRepository):
    """Stores the whole sequence as one JSON blob, rewritten on every save."""

    def __init__(self, store: SqlAlchemyBlobStore | None = None) -> None:
        self._store = store or SqlAlchemyBlobStore()

    def load(self) -> List[HistoryRecord] | None:
        payload = self._store.read(HISTORY_KEY)
        if payload is None:
            return None
        return decode_history(payload)

    def save(self, records: List[HistoryRecord]) -> None:
        self._store.write(HISTORY_KEY, encode_history(records))
