"""Restartable delayed callbacks on the running event loop."""

from __future__ import annotations

import asyncio
from typing import Callable

from dirdigest.config import DIRDIGEST_DEBOUNCE_S


class Debouncer:
    """Run ``callback`` once after ``delay`` seconds without new triggers.

    Each ``trigger()`` pushes the deadline back, so a burst of triggers results
    in a single call. Must be used from within a running event loop.
    """

    def __init__(self, callback: Callable[[], None], delay: float = DIRDIGEST_DEBOUNCE_S) -> None:
        self.callback = callback
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """Arm the timer, restarting it if already armed."""
        loop = asyncio.get_running_loop()
        self.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()
