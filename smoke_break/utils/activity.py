"""Foreground detection for a chat based UI.

A chat has no window focus, so the user counts as "in the app" for a
short while after their last interaction with the bot.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable

from smoke_break.utils.clock import utcnow


class ActivityMonitor:
    def __init__(
        self,
        foreground_seconds: float = 120,
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> None:
        self._window = dt.timedelta(seconds=foreground_seconds)
        self._clock = clock
        self._last_seen: dt.datetime | None = None

    def touch(self) -> None:
        self._last_seen = self._clock()

    def is_hidden(self) -> bool:
        if self._last_seen is None:
            return True
        return self._clock() - self._last_seen >= self._window
