"""Host focus signal consumed by the reminder scheduler."""

from __future__ import annotations

import abc
from typing import Protocol


class AbstractVisibility(Protocol):

    @abc.abstractmethod
    def is_hidden(self) -> bool:
        """True when the application is not in the user's foreground."""
