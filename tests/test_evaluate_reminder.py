"""Tests for the pure reminder evaluator."""

from __future__ import annotations

import datetime as dt

import pytest

from smoke_break.core.entities.reminder_config import ReminderConfig
from smoke_break.core.usecases import evaluate_reminder

UTC = dt.timezone.utc

CONFIG = ReminderConfig(
    active_start=dt.time(9, 0),
    active_end=dt.time(22, 0),
    interval_minutes=60,
    notifications_enabled=True,
)


def at(hour: int, minute: int = 0, second: int = 0) -> dt.datetime:
    return dt.datetime(2024, 5, 6, hour, minute, second, tzinfo=UTC)


class TestFires:
    def test_fires_after_interval_in_window_when_hidden(self):
        event = evaluate_reminder.execute(now=at(15, 1), config=CONFIG, last_event_at=at(14, 0), app_hidden=True)
        assert event is not None
        assert event.elapsed_minutes == 61
        assert event.title == "Time for a Smoke Break?"
        assert event.body == "It's been 61 minutes. Have a virtual cigarette!"
        assert event.icon_ref

    def test_fires_exactly_at_interval(self):
        assert evaluate_reminder.execute(now=at(15, 0), config=CONFIG, last_event_at=at(14, 0), app_hidden=True)

    @pytest.mark.parametrize("now", [at(9, 0), at(22, 0), at(22, 0, 59)])
    def test_window_edges_are_inclusive(self, now):
        assert evaluate_reminder.execute(now=now, config=CONFIG, last_event_at=at(0, 0), app_hidden=True)


class TestSuppressed:
    def test_outside_window(self):
        assert evaluate_reminder.execute(now=at(23, 0), config=CONFIG, last_event_at=at(14, 0), app_hidden=True) is None

    @pytest.mark.parametrize("now", [at(0, 0), at(8, 59, 59), at(22, 1), at(23, 59)])
    def test_never_outside_window_whatever_elapsed(self, now):
        long_ago = now - dt.timedelta(days=30)
        assert evaluate_reminder.execute(now=now, config=CONFIG, last_event_at=long_ago, app_hidden=True) is None

    def test_notifications_disabled(self):
        config = ReminderConfig(dt.time(9, 0), dt.time(22, 0), 60, False)
        assert evaluate_reminder.execute(now=at(15, 1), config=config, last_event_at=at(14, 0), app_hidden=True) is None

    def test_too_soon(self):
        assert evaluate_reminder.execute(now=at(14, 59), config=CONFIG, last_event_at=at(14, 0), app_hidden=True) is None

    def test_app_in_foreground(self):
        assert evaluate_reminder.execute(now=at(15, 1), config=CONFIG, last_event_at=at(14, 0), app_hidden=False) is None

    def test_window_crossing_midnight_is_never_active(self):
        config = ReminderConfig(dt.time(22, 0), dt.time(2, 0), 30, True)
        for now in (at(23, 0), at(1, 0), at(12, 0)):
            assert evaluate_reminder.execute(now=now, config=config, last_event_at=at(0, 0) - dt.timedelta(days=1), app_hidden=True) is None


class TestDeduplication:
    def test_recent_fire_suppresses_repeat(self):
        event = evaluate_reminder.execute(
            now=at(15, 2), config=CONFIG, last_event_at=at(14, 0), app_hidden=True, last_fired_at=at(15, 1)
        )
        assert event is None

    def test_fires_again_after_another_interval(self):
        event = evaluate_reminder.execute(
            now=at(16, 1), config=CONFIG, last_event_at=at(14, 0), app_hidden=True, last_fired_at=at(15, 1)
        )
        assert event is not None
        assert event.elapsed_minutes == 121


class TestTimezone:
    def test_window_uses_local_time(self):
        tz = dt.timezone(dt.timedelta(hours=8))
        # 02:00 UTC is 10:00 at UTC+8
        now = at(2, 0)
        assert evaluate_reminder.execute(now=now, config=CONFIG, last_event_at=at(0, 0), app_hidden=True) is None
        assert evaluate_reminder.execute(now=now, config=CONFIG, last_event_at=at(0, 0), app_hidden=True, tz=tz)
