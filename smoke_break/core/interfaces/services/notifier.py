"""Notification collaborator used for reminders."""

from __future__ import annotations

import abc
from typing import Protocol


class AbstractNotifier(Protocol):

    @abc.abstractmethod
    async def request_permission(self) -> bool:
        """Return True when the user granted notification delivery."""

    @abc.abstractmethod
    async def show(self, title: str, body: str, icon_ref: str | None = None) -> None:
        """Fire and forget; delivery failures are not reported back."""
