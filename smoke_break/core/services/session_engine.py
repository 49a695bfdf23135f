"""State machine driving one simulated session.

Idle -> Active -> Completed -> Idle. Progress advances through ``tick``;
reaching 100 writes a ledger record and then asks the advisory service
for a message in the background.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
import math
from typing import Callable

from apscheduler.schedulers.base import BaseScheduler

from smoke_break.core.entities.history_record import HistoryRecord
from smoke_break.core.entities.item import Item
from smoke_break.core.entities.session import CompletionSummary, SessionPhase, SessionState
from smoke_break.core.interfaces.services.advisory import AbstractAdvisoryService
from smoke_break.core.services.history_ledger import HistoryLedger
from smoke_break.utils.clock import utcnow
from smoke_break.utils.jobs import JobHandle

logger = logging.getLogger(__name__)

# Constants
SESSION_DURATION_MS = 60_000
TICK_PERIOD_MS = 50
TICK_JOB_ID = "session-tick"

SessionListener = Callable[[SessionState], None]


class SessionEngine:
    def __init__(
        self,
        ledger: HistoryLedger,
        advisory: AbstractAdvisoryService,
        item: Item,
        scheduler: BaseScheduler | None = None,
        clock: Callable[[], dt.datetime] = utcnow,
        duration_ms: float = SESSION_DURATION_MS,
        tick_period_ms: float = TICK_PERIOD_MS,
    ) -> None:
        if duration_ms <= 0:
            raise ValueError("duration_ms must be positive")
        self._ledger = ledger
        self._advisory = advisory
        self._scheduler = scheduler
        self._clock = clock
        self._duration_ms = duration_ms
        self._tick_period_ms = tick_period_ms

        self._phase = SessionPhase.IDLE
        self._elapsed_ms: float = 0
        self._item = item
        self._summary: CompletionSummary | None = None
        self._tick_job: JobHandle | None = None
        self._advisory_task: asyncio.Task | None = None
        self._listeners: list[SessionListener] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def progress(self) -> float:
        return min(self._elapsed_ms / self._duration_ms * 100, 100.0)

    @property
    def state(self) -> SessionState:
        return SessionState(phase=self._phase, progress=self.progress, item=self._item)

    @property
    def summary(self) -> CompletionSummary | None:
        return self._summary

    @property
    def advisory_task(self) -> asyncio.Task | None:
        return self._advisory_task

    @property
    def timer_running(self) -> bool:
        return self._tick_job is not None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def select_item(self, item: Item) -> bool:
        if self._phase is SessionPhase.ACTIVE:
            logger.debug("Item change refused while a session is active")
            return False
        self._item = item
        self._notify()
        return True

    def start(self) -> bool:
        if self._phase is not SessionPhase.IDLE:
            logger.debug("start() ignored in phase %s", self._phase.value)
            return False
        self._elapsed_ms = 0
        self._drop_summary()
        self._phase = SessionPhase.ACTIVE
        self._start_timer()
        self._notify()
        return True

    def tick(self, elapsed_ms: float) -> None:
        if not math.isfinite(elapsed_ms) or elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be a finite non-negative number, got {elapsed_ms!r}")
        if self._phase is not SessionPhase.ACTIVE:
            return
        self._elapsed_ms += elapsed_ms
        if self._elapsed_ms >= self._duration_ms:
            self._elapsed_ms = self._duration_ms
            self._complete()
        self._notify()

    def stop(self) -> bool:
        if self._phase is not SessionPhase.ACTIVE:
            return False
        self._stop_timer()
        self._phase = SessionPhase.IDLE
        self._elapsed_ms = 0
        self._notify()
        return True

    def reset(self) -> bool:
        if self._phase is SessionPhase.ACTIVE:
            logger.debug("reset() ignored while active, stop() first")
            return False
        if self._phase is SessionPhase.IDLE:
            return False
        self._phase = SessionPhase.IDLE
        self._elapsed_ms = 0
        self._drop_summary()
        self._notify()
        return True

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _complete(self) -> None:
        self._stop_timer()
        self._phase = SessionPhase.COMPLETED

        item = self._item
        now = self._clock()
        record = HistoryRecord(
            id=self._ledger.next_id(now),
            timestamp=now,
            item_label=item.name,
            saved_amount=item.price,
        )
        total = self._ledger.append(record)
        logger.info("Session completed with %s, saved %.2f (total %.2f)", item.name, item.price, total)

        self._summary = CompletionSummary(record=record)
        self._request_advisory(self._summary)

    def _request_advisory(self, summary: CompletionSummary) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, skipping advisory message")
            summary.message_ready = True
            return
        self._advisory_task = loop.create_task(self._fetch_advisory(summary))

    async def _fetch_advisory(self, summary: CompletionSummary) -> None:
        try:
            message = await self._advisory.get_message(summary.saved_amount)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Advisory service failed")
            message = None

        if summary is not self._summary:
            return  # session was reset meanwhile
        summary.message = message
        summary.message_ready = True
        self._notify()

    def _drop_summary(self) -> None:
        self._summary = None
        if self._advisory_task is not None and not self._advisory_task.done():
            self._advisory_task.cancel()
        self._advisory_task = None

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def _start_timer(self) -> None:
        if self._scheduler is None:
            return
        self._tick_job = JobHandle(
            self._scheduler,
            self._on_timer,
            seconds=self._tick_period_ms / 1000,
            job_id=TICK_JOB_ID,
        )

    def _stop_timer(self) -> None:
        if self._tick_job is not None:
            self._tick_job.cancel()
            self._tick_job = None

    async def _on_timer(self) -> None:
        self.tick(self._tick_period_ms)

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session listener %r failed", listener)
