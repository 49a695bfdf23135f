"""Owned handle around a single recurring APScheduler job."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

logger = logging.getLogger(__name__)


class JobHandle:
    """Interval job that lives exactly as long as its owner wants it to.

    The callback should be a coroutine function so that AsyncIOScheduler
    runs it on the event loop instead of a worker thread.
    """

    def __init__(
        self,
        scheduler: BaseScheduler,
        func: Callable[..., Awaitable[Any]],
        seconds: float,
        job_id: str,
        kwargs: dict[str, Any] | None = None,
    ) -> None:
        self.job_id = job_id
        self._scheduler = scheduler
        self._job = scheduler.add_job(
            func,
            "interval",
            seconds=seconds,
            id=job_id,
            kwargs=kwargs or {},
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        try:
            self._job.remove()
        except JobLookupError:
            logger.debug("Job %s already gone", self.job_id)
