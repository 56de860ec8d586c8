"""Timed deferral for the dashboard controller.

Two suspension points exist in the dashboard: a short deferral that lets a
loading state show before a rebuild, and a debounce for bursts of resize
events. Inside a running asyncio loop both sit on ``loop.call_later``.
Outside one, :func:`defer` runs its callback immediately, while
:class:`Debouncer` falls back to a cancellable ``threading.Timer`` so a burst
still collapses into a single call.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

_Handle = Union[asyncio.TimerHandle, threading.Timer]


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def defer(callback: Callable[[], None], delay: float) -> Optional[asyncio.TimerHandle]:
    loop = _running_loop()
    if loop is None:
        callback()
        return None
    return loop.call_later(delay, callback)


class Debouncer:
    """Run ``callback`` once, ``delay`` seconds after the last :meth:`trigger`."""

    def __init__(self, callback: Callable[[], None], delay: float) -> None:
        self.callback = callback
        self.delay = delay
        self._handle: Optional[_Handle] = None
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        loop = _running_loop()
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            if loop is not None:
                self._handle = loop.call_later(self.delay, self._fire, generation)
                return
            timer = threading.Timer(self.delay, self._fire, args=(generation,))
            timer.daemon = True
            self._handle = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Pending debounced call cancelled")

    def _fire(self, generation: int) -> None:
        with self._lock:
            # a newer trigger superseded this one after it started
            if generation != self._generation:
                return
            self._handle = None
        self.callback()
