"""Reminder raised by the evaluator for the notification service."""

from __future__ import annotations

from dataclasses import dataclass

REMINDER_TITLE = "Time for a Smoke Break?"
REMINDER_ICON = "https://cdn-icons-png.flaticon.com/512/305/305106.png"


@dataclass(frozen=True, slots=True)
class ReminderEvent:
    elapsed_minutes: int
    title: str = REMINDER_TITLE
    icon_ref: str = REMINDER_ICON

    @property
    def body(self) -> str:
        return f"It's been {self.elapsed_minutes} minutes. Have a virtual cigarette!"
