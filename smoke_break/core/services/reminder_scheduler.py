"""Recurring reminder evaluation bound to the current settings and ledger."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable

from apscheduler.schedulers.base import BaseScheduler

from smoke_break.core.entities.reminder_config import ReminderConfig
from smoke_break.core.entities.reminder_event import ReminderEvent
from smoke_break.core.interfaces.services.notifier import AbstractNotifier
from smoke_break.core.interfaces.services.visibility import AbstractVisibility
from smoke_break.core.services.history_ledger import HistoryLedger
from smoke_break.core.services.settings_store import SettingsStore
from smoke_break.core.usecases import evaluate_reminder as evaluate_reminder_uc
from smoke_break.utils.clock import utcnow
from smoke_break.utils.jobs import JobHandle

logger = logging.getLogger(__name__)

REMINDER_PERIOD_SECONDS = 60
REMINDER_JOB_ID = "reminder-evaluation"


class ReminderScheduler:
    """Owns the periodic evaluation job.

    Each job carries a snapshot of the config and of the newest record
    instant. Any settings update or ledger mutation cancels the job and
    starts a fresh one against the new state. An empty ledger counts from
    the moment it became empty: scheduler start, or the last clear.
    """

    def __init__(
        self,
        settings: SettingsStore,
        ledger: HistoryLedger,
        notifier: AbstractNotifier,
        visibility: AbstractVisibility,
        scheduler: BaseScheduler,
        tz: dt.tzinfo = dt.timezone.utc,
        clock: Callable[[], dt.datetime] = utcnow,
        period_seconds: float = REMINDER_PERIOD_SECONDS,
    ) -> None:
        self._settings = settings
        self._ledger = ledger
        self._notifier = notifier
        self._visibility = visibility
        self._scheduler = scheduler
        self._tz = tz
        self._clock = clock
        self._period_seconds = period_seconds

        self._job: JobHandle | None = None
        self._unsubscribe: list[Callable[[], None]] = []
        self.started_at: dt.datetime | None = None
        self._empty_since: dt.datetime | None = None
        self.last_fired_at: dt.datetime | None = None

    @property
    def running(self) -> bool:
        return self._job is not None

    def start(self) -> None:
        if self.started_at is not None:
            return
        self.started_at = self._clock()
        self._empty_since = self.started_at
        self._unsubscribe = [
            self._settings.subscribe(lambda _config: self.reschedule()),
            self._ledger.subscribe(self._on_ledger_change),
        ]
        self.reschedule()

    def stop(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []
        self._cancel_job()
        self.started_at = None

    def reschedule(self) -> None:
        if self.started_at is None:
            return
        self._cancel_job()
        self._job = JobHandle(
            self._scheduler,
            self.evaluate,
            seconds=self._period_seconds,
            job_id=REMINDER_JOB_ID,
            kwargs={
                "config": self._settings.get(),
                "last_event_at": self._last_event_at(),
            },
        )
        logger.debug("Reminder evaluation rescheduled")

    async def evaluate(self, config: ReminderConfig, last_event_at: dt.datetime) -> ReminderEvent | None:
        now = self._clock()
        event = evaluate_reminder_uc.execute(
            now=now,
            config=config,
            last_event_at=last_event_at,
            app_hidden=self._visibility.is_hidden(),
            tz=self._tz,
            last_fired_at=self.last_fired_at,
        )
        if event is None:
            return None

        self.last_fired_at = now
        logger.info("Reminder fired after %d minutes", event.elapsed_minutes)
        await self._notifier.show(event.title, event.body, event.icon_ref)
        return event

    def _last_event_at(self) -> dt.datetime:
        latest = self._ledger.latest()
        if latest is not None:
            return latest.timestamp
        return self._empty_since

    def _on_ledger_change(self, ledger: HistoryLedger) -> None:
        if ledger.latest() is None:
            self._empty_since = self._clock()
        self.reschedule()

    def _cancel_job(self) -> None:
        if self._job is not None:
            self._job.cancel()
            self._job = None
