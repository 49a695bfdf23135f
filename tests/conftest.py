"""Shared test doubles for the core services."""

from __future__ import annotations

import datetime as dt

import pytest
from apscheduler.jobstores.base import JobLookupError

from smoke_break.core.entities.item import Item
from smoke_break.core.services.history_ledger import HistoryLedger
from smoke_break.core.services.settings_store import SettingsStore
from smoke_break.dataproviders.repositories.memory import InMemoryHistoryRepository, InMemorySettingsRepository

UTC = dt.timezone.utc


class FakeJob:
    def __init__(self, scheduler: "FakeScheduler", job_id: str, func, trigger: str, kwargs: dict, options: dict):
        self.scheduler = scheduler
        self.id = job_id
        self.func = func
        self.trigger = trigger
        self.kwargs = kwargs
        self.options = options

    def remove(self) -> None:
        if self.scheduler.jobs.get(self.id) is not self:
            raise JobLookupError(self.id)
        del self.scheduler.jobs[self.id]
        self.scheduler.removed.append(self.id)


class FakeScheduler:
    """Records jobs instead of running them; tests fire them by hand."""

    def __init__(self) -> None:
        self.jobs: dict[str, FakeJob] = {}
        self.added: list[str] = []
        self.removed: list[str] = []

    def add_job(self, func, trigger, id=None, kwargs=None, replace_existing=False, **options):
        if id in self.jobs and not replace_existing:
            raise ValueError(f"duplicate job {id}")
        job = FakeJob(self, id, func, trigger, dict(kwargs or {}), options)
        self.jobs[id] = job
        self.added.append(id)
        return job

    async def fire(self, job_id: str):
        job = self.jobs[job_id]
        return await job.func(**job.kwargs)


class FakeAdvisory:
    def __init__(self, message: str | None = "Nice one.", error: Exception | None = None) -> None:
        self.message = message
        self.error = error
        self.calls: list[float] = []

    async def get_message(self, saved_amount: float) -> str | None:
        self.calls.append(saved_amount)
        if self.error is not None:
            raise self.error
        return self.message


class FakeNotifier:
    def __init__(self, granted: bool = True) -> None:
        self.granted = granted
        self.permission_requests = 0
        self.shown: list[tuple[str, str, str | None]] = []

    async def request_permission(self) -> bool:
        self.permission_requests += 1
        return self.granted

    async def show(self, title: str, body: str, icon_ref: str | None = None) -> None:
        self.shown.append((title, body, icon_ref))


class FakeVisibility:
    def __init__(self, hidden: bool = True) -> None:
        self.hidden = hidden

    def is_hidden(self) -> bool:
        return self.hidden


class FakeClock:
    def __init__(self, now: dt.datetime) -> None:
        self.now = now

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += dt.timedelta(**delta)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(dt.datetime(2024, 5, 6, 14, 0, tzinfo=UTC))


@pytest.fixture
def item() -> Item:
    return Item(id="marlboro", name="Marlboro", price=1.5)


@pytest.fixture
def history_repo() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


@pytest.fixture
def settings_repo() -> InMemorySettingsRepository:
    return InMemorySettingsRepository()


@pytest.fixture
def ledger(history_repo) -> HistoryLedger:
    ledger = HistoryLedger(history_repo)
    ledger.load()
    return ledger


@pytest.fixture
def settings(settings_repo) -> SettingsStore:
    store = SettingsStore(settings_repo)
    store.load()
    return store


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def make_advisory():
    """Factory for advisory doubles, e.g. ``make_advisory(error=RuntimeError())``."""
    return FakeAdvisory


@pytest.fixture
def make_notifier():
    return FakeNotifier


@pytest.fixture
def visibility() -> FakeVisibility:
    return FakeVisibility(hidden=True)
