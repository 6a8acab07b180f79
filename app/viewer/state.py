from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from app.config import AUTO_REFRESH_SECONDS, logger
from app.models import InboxResult, Message, QueryParams

from .render import COPY_LABEL


class RefreshTimer:
    """Single-owner handle for a recurring coroutine call.

    The first call happens one interval after ``start``. ``cancel`` stops the
    loop before its next tick; a tick that is already running is cancelled too.
    """

    def __init__(self, callback: Callable[[], Awaitable[object]], interval: float = AUTO_REFRESH_SECONDS) -> None:
        self._callback = callback
        self._interval = interval
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @classmethod
    def start(cls, callback: Callable[[], Awaitable[object]], interval: float = AUTO_REFRESH_SECONDS) -> "RefreshTimer":
        timer = cls(callback, interval)
        timer._task = asyncio.create_task(timer._run_loop())
        logger.info("Auto-refresh started (every %ss)", interval)
        return timer

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.info("Auto-refresh stopped")

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.ticks += 1
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # noqa: BLE001
                logger.error("Auto-refresh tick failed: %s", exc, exc_info=True)


@dataclass
class ViewState:
    params: QueryParams = field(default_factory=QueryParams)
    inbox: Optional[InboxResult] = None
    selected: Optional[Message] = None
    auto_refresh: Optional[RefreshTimer] = None
    namespace: str = ""
    copy_label: str = COPY_LABEL

    def selected_index(self) -> Optional[int]:
        if self.selected is None or self.inbox is None or not self.inbox.emails:
            return None
        for index, message in enumerate(self.inbox.emails):
            if message is self.selected:
                return index
        return None


__all__ = ["RefreshTimer", "ViewState"]
