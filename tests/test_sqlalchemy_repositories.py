"""SQLAlchemy blob repositories against a temporary SQLite file."""

from __future__ import annotations

import datetime as dt

import pytest

from smoke_break.core.entities.history_record import HistoryRecord
from smoke_break.core.entities.reminder_config import DEFAULT_CONFIG, ReminderConfig
from smoke_break.core.errors import CorruptDataError
from smoke_break.core.services.history_ledger import HistoryLedger
from smoke_break.core.services.settings_store import SettingsStore
from smoke_break.dataproviders.db import init_db, make_engine, make_session_factory, session_scope
from smoke_break.dataproviders.repositories._codec import HISTORY_KEY, SETTINGS_KEY
from smoke_break.dataproviders.repositories._models import BlobModel
from smoke_break.dataproviders.repositories.blob_store import SqlAlchemyBlobStore
from smoke_break.dataproviders.repositories.history_repository import SqlAlchemyHistoryRepository
from smoke_break.dataproviders.repositories.settings_repository import SqlAlchemySettingsRepository

UTC = dt.timezone.utc


@pytest.fixture
def store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(engine)
    factory = make_session_factory(engine)
    yield SqlAlchemyBlobStore(factory)
    factory.remove()
    engine.dispose()


def make_record(n: int) -> HistoryRecord:
    ts = dt.datetime(2024, 5, 6, 12, n, tzinfo=UTC)
    return HistoryRecord(id=int(ts.timestamp() * 1000), timestamp=ts, item_label="Esse", saved_amount=1.2)


class TestHistoryRepository:
    def test_missing_blob_loads_none(self, store):
        assert SqlAlchemyHistoryRepository(store).load() is None

    def test_save_and_load(self, store):
        repo = SqlAlchemyHistoryRepository(store)
        records = [make_record(2), make_record(1)]
        repo.save(records)
        assert repo.load() == records

    def test_save_overwrites(self, store):
        repo = SqlAlchemyHistoryRepository(store)
        repo.save([make_record(1)])
        repo.save([])
        assert repo.load() == []

    def test_corrupt_blob_raises(self, store):
        store.write(HISTORY_KEY, "{broken")
        with pytest.raises(CorruptDataError):
            SqlAlchemyHistoryRepository(store).load()

    def test_ledger_survives_restart(self, store):
        ledger = HistoryLedger(SqlAlchemyHistoryRepository(store))
        ledger.load()
        ledger.append(make_record(1))
        ledger.append(make_record(2))

        restarted = HistoryLedger(SqlAlchemyHistoryRepository(store))
        restarted.load()
        assert restarted.records() == ledger.records()
        assert restarted.total() == pytest.approx(2.4)


class TestSettingsRepository:
    def test_round_trip_through_store(self, store):
        cfg = ReminderConfig(dt.time(8, 30), dt.time(20, 0), 45, True)
        SettingsStore(SqlAlchemySettingsRepository(store)).update(cfg)
        assert SettingsStore(SqlAlchemySettingsRepository(store)).load() == cfg

    def test_invalid_blob_gives_defaults(self, store):
        store.write(SETTINGS_KEY, '{"activeStart": "09:00", "activeEnd": "22:00", "intervalMinutes": 7, "notificationsEnabled": true}')
        with pytest.raises(CorruptDataError):
            SqlAlchemySettingsRepository(store).load()
        assert SettingsStore(SqlAlchemySettingsRepository(store)).load() == DEFAULT_CONFIG

    def test_blobs_are_independent(self, store):
        SqlAlchemySettingsRepository(store).save(DEFAULT_CONFIG)
        assert SqlAlchemyHistoryRepository(store).load() is None


class TestBlobStore:
    def test_write_stamps_updated_at(self, store):
        store.write(SETTINGS_KEY, "{}")
        with session_scope(store._session_factory) as session:
            first = session.get(BlobModel, SETTINGS_KEY).updated_at
        assert isinstance(first, dt.datetime)

        store.write(SETTINGS_KEY, '{"a": 1}')
        with session_scope(store._session_factory) as session:
            assert session.get(BlobModel, SETTINGS_KEY).updated_at >= first
