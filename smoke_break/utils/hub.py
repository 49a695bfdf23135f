"""Utilities to generate and update the single hub message."""

from __future__ import annotations

import html
from typing import Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from smoke_break.core.entities.history_record import HistoryRecord
from smoke_break.core.entities.reminder_config import ReminderConfig, format_time_of_day
from smoke_break.core.entities.session import CompletionSummary, SessionPhase, SessionState

FALLBACK_MESSAGE = "Your lungs thank you!"


def progress_bar(current: float, total: float, length: int = 10) -> str:
    if total <= 0:
        return ""  # avoid div/zero
    filled = int((current / total) * length)
    filled = min(max(filled, 0), length)
    return "🟥" * filled + "⬜" * (length - filled)


def build_hub_text(
    state: SessionState,
    total_saved: float,
    summary: CompletionSummary | None = None,
) -> str:
    lines: list[str] = [
        f"💰 Total saved: <b>¥{total_saved:.2f}</b>",
        "",
        f"🚬 <b>{html.escape(state.item.name)}</b>  ¥{state.item.price:.1f} / stick",
    ]

    if state.phase is SessionPhase.ACTIVE:
        lines.append(f"{progress_bar(state.progress, 100)} {state.progress:.0f}%")
    elif state.phase is SessionPhase.COMPLETED:
        lines.append("✅ <b>Success!</b>")
        if summary is not None:
            lines.append(f"You saved ¥{summary.saved_amount:.2f}")
            if not summary.message_ready:
                lines.append("<i>…</i>")
            else:
                lines.append(f"<i>“{html.escape(summary.message or FALLBACK_MESSAGE)}”</i>")
    else:
        lines.append("Tap 🔥 to light one up.")

    return "\n".join(lines)


def build_hub_keyboard(phase: SessionPhase) -> InlineKeyboardMarkup:
    if phase is SessionPhase.ACTIVE:
        rows = [[InlineKeyboardButton(text="🧯 Put out", callback_data="STOP")]]
    elif phase is SessionPhase.COMPLETED:
        rows = [[InlineKeyboardButton(text="🔁 New one", callback_data="RESET")]]
    else:
        rows = [
            [
                InlineKeyboardButton(text="◀️", callback_data="PREV"),
                InlineKeyboardButton(text="🔥 Light one", callback_data="START"),
                InlineKeyboardButton(text="▶️", callback_data="NEXT"),
            ]
        ]
    rows.append(
        [
            InlineKeyboardButton(text="📜 History", callback_data="HISTORY"),
            InlineKeyboardButton(text="⚙️ Settings", callback_data="SETTINGS"),
        ]
    )
    return InlineKeyboardMarkup(inline_keyboard=rows)


def build_history_text(records: Sequence[HistoryRecord], total_saved: float, limit: int = 10) -> str:
    if not records:
        return "📜 <b>Records</b>\nEmpty ashtray."
    lines = ["📜 <b>Records</b>"]
    for record in records[:limit]:
        when = record.timestamp.strftime("%Y-%m-%d %H:%M")
        lines.append(f"{when}  {html.escape(record.item_label)}  +¥{record.saved_amount:.2f}")
    if len(records) > limit:
        lines.append(f"… and {len(records) - limit} more")
    lines.append(f"Total: ¥{total_saved:.2f}")
    return "\n".join(lines)


def build_settings_text(config: ReminderConfig) -> str:
    state = "On" if config.notifications_enabled else "Off"
    return (
        "⚙️ <b>Settings</b>\n"
        f"Active hours: {format_time_of_day(config.active_start)}–{format_time_of_day(config.active_end)}\n"
        f"Reminder interval: {config.interval_minutes} min\n"
        f"Notifications: {state}\n\n"
        "/hours HH:MM HH:MM — change active hours\n"
        "/interval 30|45|60|90|120 — change interval\n"
        "/notify — enable reminders, /mute — disable\n"
        "/clear — wipe history"
    )
