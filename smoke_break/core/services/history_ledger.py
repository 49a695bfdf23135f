"""Append-only ledger of completed sessions and its savings total."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, List

from smoke_break.core.entities.history_record import HistoryRecord
from smoke_break.core.errors import CorruptDataError, PersistenceError
from smoke_break.core.interfaces.repositories.history_repo import AbstractHistoryRepository
from smoke_break.utils.clock import to_epoch_ms

logger = logging.getLogger(__name__)

LedgerListener = Callable[["HistoryLedger"], None]


class HistoryLedger:
    """Newest-first record sequence.

    Persistence is best effort: a failed write is logged and remembered in
    ``last_error`` while the in-memory sequence stays authoritative.
    """

    def __init__(self, repo: AbstractHistoryRepository) -> None:
        self._repo = repo
        self._records: list[HistoryRecord] = []
        self._listeners: list[LedgerListener] = []
        self.last_error: PersistenceError | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def records(self) -> List[HistoryRecord]:
        return list(self._records)

    def latest(self) -> HistoryRecord | None:
        return self._records[0] if self._records else None

    def total(self) -> float:
        # always derived from the records, never a separate counter
        return sum(r.saved_amount for r in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def next_id(self, now: dt.datetime) -> int:
        """Time based id, bumped when the clock did not move forward."""
        candidate = to_epoch_ms(now)
        if self._records:
            candidate = max(candidate, max(r.id for r in self._records) + 1)
        return candidate

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def load(self) -> None:
        try:
            stored = self._repo.load()
        except CorruptDataError as exc:
            logger.warning("Stored history is malformed, starting empty: %s", exc)
            stored = None
        except PersistenceError as exc:
            logger.warning("Could not read stored history, starting empty: %s", exc)
            stored = None
        self._records = list(stored or [])
        logger.info("Loaded %d history records", len(self._records))
        self._notify()

    def append(self, record: HistoryRecord) -> float:
        self._records.insert(0, record)
        self._persist()
        self._notify()
        return self.total()

    def clear(self) -> None:
        self._records = []
        self._persist()
        self._notify()

    def subscribe(self, listener: LedgerListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _persist(self) -> None:
        try:
            self._repo.save(list(self._records))
            self.last_error = None
        except PersistenceError as exc:
            self.last_error = exc
            logger.error("Failed to persist history (%d records kept in memory): %s", len(self._records), exc)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Ledger listener %r failed", listener)
