"""Reminder configuration entity and its validation rules."""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import Any

from smoke_break.core.errors import SettingsValidationError

ALLOWED_INTERVALS: tuple[int, ...] = (30, 45, 60, 90, 120)

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_time_of_day(value: str) -> dt.time:
    """Parse a strict ``HH:MM`` string."""
    if not isinstance(value, str):
        raise SettingsValidationError(f"time of day must be a 'HH:MM' string, got {value!r}")
    match = _TIME_RE.match(value)
    if not match:
        raise SettingsValidationError(f"malformed time of day: {value!r}")
    return dt.time(int(match.group(1)), int(match.group(2)))


def format_time_of_day(value: dt.time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def minutes_of_day(value: dt.time) -> int:
    return value.hour * 60 + value.minute


@dataclass(frozen=True, slots=True)
class ReminderConfig:
    active_start: dt.time
    active_end: dt.time
    interval_minutes: int
    notifications_enabled: bool

    def validate(self) -> None:
        """Raise SettingsValidationError unless every field is acceptable."""
        for name in ("active_start", "active_end"):
            value = getattr(self, name)
            if not isinstance(value, dt.time) or value.second or value.microsecond:
                raise SettingsValidationError(f"{name} must be a whole-minute time of day")
        # bool is an int subclass and 60.0 == 60, so check the type first
        interval = self.interval_minutes
        if not isinstance(interval, int) or isinstance(interval, bool) or interval not in ALLOWED_INTERVALS:
            raise SettingsValidationError(
                f"interval_minutes must be one of {ALLOWED_INTERVALS}, got {self.interval_minutes!r}"
            )
        if not isinstance(self.notifications_enabled, bool):
            raise SettingsValidationError("notifications_enabled must be a boolean")

    @property
    def window_wraps_midnight(self) -> bool:
        return minutes_of_day(self.active_end) < minutes_of_day(self.active_start)

    def to_dict(self) -> dict[str, Any]:
        return {
            "activeStart": format_time_of_day(self.active_start),
            "activeEnd": format_time_of_day(self.active_end),
            "intervalMinutes": self.interval_minutes,
            "notificationsEnabled": self.notifications_enabled,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ReminderConfig:
        if not isinstance(data, dict):
            raise SettingsValidationError("settings payload must be an object")
        try:
            config = cls(
                active_start=parse_time_of_day(data["activeStart"]),
                active_end=parse_time_of_day(data["activeEnd"]),
                interval_minutes=data["intervalMinutes"],
                notifications_enabled=data["notificationsEnabled"],
            )
        except KeyError as exc:
            raise SettingsValidationError(f"missing settings field {exc.args[0]!r}") from exc
        config.validate()
        return config


DEFAULT_CONFIG = ReminderConfig(
    active_start=dt.time(9, 0),
    active_end=dt.time(22, 0),
    interval_minutes=60,
    notifications_enabled=False,
)
