"""SQLAlchemy implementation of the settings repository."""

from __future__ import annotations

from smoke_break.core.entities.reminder_config import ReminderConfig
from smoke_break.core.interfaces.repositories.settings_repo import AbstractSettingsRepository
from smoke_break.dataproviders.repositories._codec import SETTINGS_KEY, decode_settings, encode_settings
from smoke_break.dataproviders.repositories.blob_store import SqlAlchemyBlobStore


class SqlAlchemySettingsRepository(AbstractSettingsRepository):
    def __init__(self, store: SqlAlchemyBlobStore | None = None) -> None:
        self._store = store or SqlAlchemyBlobStore()

    def load(self) -> ReminderConfig | None:
        payload = self._store.read(SETTINGS_KEY)
        if payload is None:
            return None
        return decode_settings(payload)

    def save(self, config: ReminderConfig) -> None:
        self._store.write(SETTINGS_KEY, encode_settings(config))
