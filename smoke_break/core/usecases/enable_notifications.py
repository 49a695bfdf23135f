"""Turn reminder notifications on after asking the user for permission."""

from __future__ import annotations

import logging

from smoke_break.core.interfaces.services.notifier import AbstractNotifier
from smoke_break.core.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)

CONFIRMATION_TITLE = "Reminders Enabled"
CONFIRMATION_BODY = "You will be reminded to take a break."


async def execute(settings: SettingsStore, notifier: AbstractNotifier) -> bool:
    """Return whether notifications ended up enabled.

    A denial switches delivery off and is not retried until the user asks
    again.
    """
    granted = await notifier.request_permission()
    if not granted:
        logger.info("Notification permission denied")
        if settings.get().notifications_enabled:
            settings.patch(notifications_enabled=False)
        return False

    settings.patch(notifications_enabled=True)
    await notifier.show(CONFIRMATION_TITLE, CONFIRMATION_BODY)
    return True


def disable(settings: SettingsStore) -> None:
    settings.patch(notifications_enabled=False)
