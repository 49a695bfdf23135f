"""Decide whether a reminder should fire at a given instant."""

from __future__ import annotations

import datetime as dt

from smoke_break.core.entities.reminder_config import ReminderConfig, minutes_of_day
from smoke_break.core.entities.reminder_event import ReminderEvent


def in_active_window(now: dt.datetime, config: ReminderConfig, tz: dt.tzinfo) -> bool:
    """Minute resolution, both ends inclusive. Windows crossing midnight never match."""
    if config.window_wraps_midnight:
        return False
    local = now.astimezone(tz)
    current = local.hour * 60 + local.minute
    return minutes_of_day(config.active_start) <= current <= minutes_of_day(config.active_end)


def execute(
    now: dt.datetime,
    config: ReminderConfig,
    last_event_at: dt.datetime,
    app_hidden: bool,
    tz: dt.tzinfo = dt.timezone.utc,
    last_fired_at: dt.datetime | None = None,
) -> ReminderEvent | None:
    """Return the reminder to show, or None.

    ``last_event_at`` is the newest ledger record, or whatever instant the
    caller uses when the ledger is empty. ``last_fired_at`` suppresses
    repeated reminders until another full interval has passed.
    """
    if not config.notifications_enabled:
        return None

    if not in_active_window(now, config, tz):
        return None

    elapsed_minutes = (now - last_event_at).total_seconds() / 60
    if elapsed_minutes < config.interval_minutes:
        return None

    if last_fired_at is not None:
        since_fired = (now - last_fired_at).total_seconds() / 60
        if since_fired < config.interval_minutes:
            return None

    if not app_hidden:
        return None

    return ReminderEvent(elapsed_minutes=int(elapsed_minutes))
