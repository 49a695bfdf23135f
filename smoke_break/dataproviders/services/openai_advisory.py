"""OpenAI backed advisory messages shown after a completed session."""

from __future__ import annotations

import logging
import os
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from smoke_break.core.interfaces.services.advisory import AbstractAdvisoryService

logger = logging.getLogger(__name__)

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
ADVISORY_MODEL = os.getenv("SB_ADVISORY_MODEL", "gpt-4o-mini")
REQUEST_TIMEOUT_SECONDS = 20.0

PROMPT_TEMPLATE = (
    "You are a witty, slightly dark-humored smoking cessation assistant. "
    'The user just finished a "virtual cigarette" instead of a real one, saving {amount:.2f} CNY. '
    "Give them a very short (max 20 words), punchy fact about health or money they saved. "
    "Language: {language}."
)


def build_prompt(saved_amount: float, language: str = "English") -> str:
    return PROMPT_TEMPLATE.format(amount=saved_amount, language=language)


class OpenAIAdvisoryService(AbstractAdvisoryService):
    """Returns None on every failure path, including a missing API key."""

    def __init__(
        self,
        api_key: str | None = OPENAI_API_KEY,
        model: str = ADVISORY_MODEL,
        language: str = "English",
        client: Any | None = None,
    ) -> None:
        self.model = model
        self.language = language
        if client is not None:
            self._client = client
        elif api_key:
            self._client = AsyncOpenAI(api_key=api_key, timeout=REQUEST_TIMEOUT_SECONDS, max_retries=1)
        else:
            self._client = None

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def get_message(self, saved_amount: float) -> str | None:
        if self._client is None:
            return None
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": build_prompt(saved_amount, self.language)}],
                max_tokens=80,
                temperature=0.9,
            )
        except OpenAIError as exc:
            logger.warning("Advisory request failed: %s", exc)
            return None
        except Exception:
            logger.exception("Unexpected advisory failure")
            return None

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError):
            logger.warning("Advisory response had no message")
            return None
        text = (text or "").strip()
        return text or None
