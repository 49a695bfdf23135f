"""Repository interface for the settings blob."""

from __future__ import annotations

import abc
from typing import Protocol

from smoke_break.core.entities.reminder_config import ReminderConfig


class AbstractSettingsRepository(Protocol):
    """Settings repository contract."""

    @abc.abstractmethod
    def load(self) -> ReminderConfig | None: ...

    @abc.abstractmethod
    def save(self, config: ReminderConfig) -> None: ...
