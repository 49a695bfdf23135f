"""Delivers reminders to the owner's Telegram chat."""

from __future__ import annotations

import html
import logging

from aiogram import Bot
from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramAPIError, TelegramForbiddenError

from smoke_break.core.interfaces.services.notifier import AbstractNotifier

logger = logging.getLogger(__name__)


class TelegramNotifier(AbstractNotifier):
    def __init__(self, bot: Bot, chat_id: int) -> None:
        self._bot = bot
        self._chat_id = chat_id

    async def request_permission(self) -> bool:
        """The chat counts as granting permission while the bot can reach it."""
        try:
            await self._bot.send_chat_action(chat_id=self._chat_id, action=ChatAction.TYPING)
        except TelegramForbiddenError:
            return False
        except TelegramAPIError as e:
            logger.warning("Permission probe for chat %s failed: %s", self._chat_id, e)
            return False
        return True

    async def show(self, title: str, body: str, icon_ref: str | None = None) -> None:
        text = f"<b>{html.escape(title)}</b>\n{html.escape(body)}"
        try:
            if icon_ref:
                await self._bot.send_photo(chat_id=self._chat_id, photo=icon_ref, caption=text)
            else:
                await self._bot.send_message(chat_id=self._chat_id, text=text)
        except Exception as e:
            logger.warning("Failed to send notification to %s: %s", self._chat_id, e)
