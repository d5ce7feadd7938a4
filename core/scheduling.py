# -*- coding: utf-8 -*-

"""
One-shot schedulers with the same shape as Tk's after()/after_cancel().

TimerEngine only needs those two calls, so a tkinter root (or any widget)
can be handed to it directly. AsyncioScheduler gives the same shape on top
of an asyncio event loop for hosts without Tk.
"""

import asyncio
from typing import Any, Callable, Optional


class AsyncioScheduler:
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            # must be called from inside the loop that will run the ticks
            self._loop = asyncio.get_running_loop()
        return self._loop

    def after(self, ms: int, fn: Callable[[], Any]) -> asyncio.TimerHandle:
        return self.loop.call_later(ms / 1000.0, fn)

    def after_cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
