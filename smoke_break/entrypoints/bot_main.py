"""Entry point for the SmokeBreak Telegram bot.

The bot serves a single owner chat and acts as the rendering layer: it
issues commands to the session engine and re-renders the hub whenever
the engine reports a visible change.

Usage:
    export BOT_TOKEN="<your_token>"
    export OWNER_CHAT_ID="<your_chat_id>"
    python -m smoke_break.entrypoints.bot_main
"""

from __future__ import annotations

import asyncio
import logging
import os
from zoneinfo import ZoneInfo

from aiogram import Bot, Dispatcher, F
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import CallbackQuery, Message
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from smoke_break.core.entities.reminder_config import parse_time_of_day
from smoke_break.core.entities.session import SessionState
from smoke_break.core.errors import SettingsValidationError
from smoke_break.core.services.history_ledger import HistoryLedger
from smoke_break.core.services.reminder_scheduler import ReminderScheduler
from smoke_break.core.services.session_engine import SessionEngine
from smoke_break.core.services.settings_store import SettingsStore
from smoke_break.core.usecases import enable_notifications as enable_notifications_uc
from smoke_break.dataproviders.db import engine, init_db
from smoke_break.dataproviders.repositories.history_repository import SqlAlchemyHistoryRepository
from smoke_break.dataproviders.repositories.settings_repository import SqlAlchemySettingsRepository
from smoke_break.dataproviders.services.openai_advisory import OpenAIAdvisoryService
from smoke_break.dataproviders.services.telegram_notifier import TelegramNotifier
from smoke_break.utils import hub
from smoke_break.utils.activity import ActivityMonitor
from smoke_break.utils.catalog import Catalog

# ---------------------------------------------------------------------------
# Configure logging & DB
# ---------------------------------------------------------------------------
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
# the session tick runs every 50 ms
logging.getLogger("apscheduler.executors").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

init_db(engine)

BOT_TOKEN = os.getenv("BOT_TOKEN")
if not BOT_TOKEN:
    raise RuntimeError("BOT_TOKEN env variable not set.")

OWNER_CHAT_ID = int(os.getenv("OWNER_CHAT_ID", "0"))
if not OWNER_CHAT_ID:
    raise RuntimeError("OWNER_CHAT_ID env variable not set.")

TIMEZONE = ZoneInfo(os.getenv("SB_TIMEZONE", "UTC"))
FOREGROUND_SECONDS = float(os.getenv("SB_FOREGROUND_SECONDS", "120"))

# ---------------------------------------------------------------------------
# Bot, scheduler & core components
# ---------------------------------------------------------------------------
bot = Bot(token=BOT_TOKEN, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
dp = Dispatcher()
dp.message.filter(F.chat.id == OWNER_CHAT_ID)
dp.callback_query.filter(F.message.chat.id == OWNER_CHAT_ID)

scheduler = AsyncIOScheduler(timezone=TIMEZONE)

catalog = Catalog()
activity = ActivityMonitor(foreground_seconds=FOREGROUND_SECONDS)
notifier = TelegramNotifier(bot, OWNER_CHAT_ID)

settings_store = SettingsStore(SqlAlchemySettingsRepository())
ledger = HistoryLedger(SqlAlchemyHistoryRepository())
session_engine = SessionEngine(
    ledger=ledger,
    advisory=OpenAIAdvisoryService(),
    item=catalog.first,
    scheduler=scheduler,
)
reminders = ReminderScheduler(
    settings=settings_store,
    ledger=ledger,
    notifier=notifier,
    visibility=activity,
    scheduler=scheduler,
    tz=TIMEZONE,
)

# ---------------------------------------------------------------------------
# Hub refresh
# ---------------------------------------------------------------------------

_hub_message_id: int | None = None
_last_render_key: tuple | None = None
_background_tasks: set[asyncio.Task] = set()


def _render_key(state: SessionState) -> tuple:
    summary = session_engine.summary
    return (
        state.phase,
        state.item.id,
        int(state.progress // 10),
        summary.message_ready if summary else None,
    )


async def refresh_hub(force_new: bool = False) -> None:
    """Create or update the single hub message."""
    global _hub_message_id, _last_render_key

    state = session_engine.state
    _last_render_key = _render_key(state)
    text = hub.build_hub_text(state, ledger.total(), session_engine.summary)
    keyboard = hub.build_hub_keyboard(state.phase)

    if _hub_message_id and not force_new:
        try:
            await bot.edit_message_text(
                chat_id=OWNER_CHAT_ID,
                message_id=_hub_message_id,
                text=text,
                reply_markup=keyboard,
            )
            return
        except TelegramBadRequest as e:
            if "message is not modified" in str(e).lower():
                return
            logger.debug("Hub edit failed, sending a new one: %s", e)

    sent = await bot.send_message(OWNER_CHAT_ID, text=text, reply_markup=keyboard)
    _hub_message_id = sent.message_id


def _on_session_change(state: SessionState) -> None:
    # skip renders that would not change what the user sees
    if _render_key(state) == _last_render_key:
        return
    task = asyncio.get_running_loop().create_task(refresh_hub())
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


session_engine.subscribe(_on_session_change)


@dp.message.middleware()
async def _track_message_activity(handler, event, data):
    activity.touch()
    return await handler(event, data)


@dp.callback_query.middleware()
async def _track_callback_activity(handler, event, data):
    activity.touch()
    return await handler(event, data)


# ---------------------------------------------------------------------------
# Session handlers
# ---------------------------------------------------------------------------


@dp.message(CommandStart())
async def cmd_start(message: Message) -> None:
    await refresh_hub(force_new=True)


@dp.callback_query(F.data == "START")
async def handle_start(callback: CallbackQuery) -> None:
    if session_engine.start():
        await callback.answer("🔥")
    else:
        await callback.answer()


@dp.callback_query(F.data == "STOP")
async def handle_stop(callback: CallbackQuery) -> None:
    if session_engine.stop():
        await callback.answer("Put out")
    else:
        await callback.answer()


@dp.callback_query(F.data == "RESET")
async def handle_reset(callback: CallbackQuery) -> None:
    session_engine.reset()
    await callback.answer()


@dp.callback_query(F.data.in_({"PREV", "NEXT"}))
async def handle_browse(callback: CallbackQuery) -> None:
    offset = 1 if callback.data == "NEXT" else -1
    item = catalog.neighbour(session_engine.state.item, offset)
    session_engine.select_item(item)
    await callback.answer(item.name)


# ---------------------------------------------------------------------------
# History & settings handlers
# ---------------------------------------------------------------------------


@dp.message(Command("history"))
async def cmd_history(message: Message) -> None:
    await message.answer(hub.build_history_text(ledger.records(), ledger.total()))


@dp.callback_query(F.data == "HISTORY")
async def handle_history(callback: CallbackQuery) -> None:
    await callback.answer()
    await bot.send_message(OWNER_CHAT_ID, hub.build_history_text(ledger.records(), ledger.total()))


@dp.message(Command("settings"))
async def cmd_settings(message: Message) -> None:
    await message.answer(hub.build_settings_text(settings_store.get()))


@dp.callback_query(F.data == "SETTINGS")
async def handle_settings(callback: CallbackQuery) -> None:
    await callback.answer()
    await bot.send_message(OWNER_CHAT_ID, hub.build_settings_text(settings_store.get()))


@dp.message(Command("hours"))
async def cmd_hours(message: Message, command: CommandObject) -> None:
    parts = (command.args or "").split()
    if len(parts) != 2:
        await message.reply("Wrong format. Example: /hours 09:00 22:00")
        return
    try:
        settings_store.patch(
            active_start=parse_time_of_day(parts[0]),
            active_end=parse_time_of_day(parts[1]),
        )
    except SettingsValidationError as exc:
        await message.reply(f"Rejected: {exc}")
        return
    await message.answer(hub.build_settings_text(settings_store.get()))


@dp.message(Command("interval"))
async def cmd_interval(message: Message, command: CommandObject) -> None:
    try:
        minutes = int((command.args or "").strip())
        settings_store.patch(interval_minutes=minutes)
    except ValueError as exc:
        # SettingsValidationError is a ValueError too
        await message.reply(f"Rejected: {exc}")
        return
    await message.answer(hub.build_settings_text(settings_store.get()))


@dp.message(Command("notify"))
async def cmd_notify(message: Message) -> None:
    enabled = await enable_notifications_uc.execute(settings_store, notifier)
    if not enabled:
        await message.reply("Notifications stay off: the chat could not be reached.")


@dp.message(Command("mute"))
async def cmd_mute(message: Message) -> None:
    enable_notifications_uc.disable(settings_store)
    await message.answer("🔕 Reminders disabled.")


@dp.message(Command("clear"))
async def cmd_clear(message: Message) -> None:
    ledger.clear()
    await message.answer("🗑 History cleared.")
    await refresh_hub()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def load_state() -> None:
    settings_store.load()
    ledger.load()


def start_background_jobs() -> None:
    """Must be called from inside the running event loop."""
    if not scheduler.running:
        scheduler.start()
    reminders.start()


async def _runner() -> None:
    """Async runner: start scheduler and polling concurrently."""
    start_background_jobs()
    try:
        await dp.start_polling(bot)
    finally:
        reminders.stop()
        scheduler.shutdown(wait=False)


def main() -> None:
    logger.info("Starting SmokeBreak...")
    load_state()
    asyncio.run(_runner())


if __name__ == "__main__":
    main()
