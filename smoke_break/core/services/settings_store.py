"""Validated, persisted reminder configuration."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable

from smoke_break.core.entities.reminder_config import DEFAULT_CONFIG, ReminderConfig
from smoke_break.core.errors import CorruptDataError, PersistenceError
from smoke_break.core.interfaces.repositories.settings_repo import AbstractSettingsRepository

logger = logging.getLogger(__name__)

SettingsListener = Callable[[ReminderConfig], None]


class SettingsStore:
    def __init__(self, repo: AbstractSettingsRepository) -> None:
        self._repo = repo
        self._config = DEFAULT_CONFIG
        self._listeners: list[SettingsListener] = []
        self.last_error: PersistenceError | None = None

    def get(self) -> ReminderConfig:
        return self._config

    def load(self) -> ReminderConfig:
        try:
            stored = self._repo.load()
        except CorruptDataError as exc:
            logger.warning("Stored settings are invalid, using defaults: %s", exc)
            stored = None
        except PersistenceError as exc:
            logger.warning("Could not read stored settings, using defaults: %s", exc)
            stored = None
        self._config = stored or DEFAULT_CONFIG
        self._notify()
        return self._config

    def update(self, new_config: ReminderConfig) -> ReminderConfig:
        """Validate and apply ``new_config``.

        Raises SettingsValidationError and leaves the current config in place
        when any field is invalid.
        """
        new_config.validate()
        self._config = new_config
        try:
            self._repo.save(new_config)
            self.last_error = None
        except PersistenceError as exc:
            self.last_error = exc
            logger.error("Failed to persist settings, keeping them in memory: %s", exc)
        self._notify()
        return self._config

    def patch(self, **changes: Any) -> ReminderConfig:
        """Update only the given fields of the current config."""
        return self.update(dataclasses.replace(self._config, **changes))

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._config)
            except Exception:
                logger.exception("Settings listener %r failed", listener)
