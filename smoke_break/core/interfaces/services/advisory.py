"""Advisory message collaborator."""

from __future__ import annotations

import abc
from typing import Protocol


class AbstractAdvisoryService(Protocol):
    """Best-effort generator of a short message after a completed session.

    Implementations return ``None`` instead of raising when they cannot
    produce a message (missing credentials, API failure).
    """

    @abc.abstractmethod
    async def get_message(self, saved_amount: float) -> str | None: ...
