"""Minimal frame clock that drives players from an external loop."""

from __future__ import annotations

import itertools
from collections.abc import Callable

TickCallback = Callable[[float], None]


class FrameClock:
    """Calls registered callbacks once per frame with the frame's delta time."""

    def __init__(self) -> None:
        self._callbacks: dict[int, TickCallback] = {}
        self._handles = itertools.count(1)
        self.elapsed = 0.0

    def add(self, callback: TickCallback) -> int:
        """Register ``callback`` and return a handle for :meth:`remove`."""
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def remove(self, handle: int) -> bool:
        """Unregister a callback; returns False for unknown handles."""
        return self._callbacks.pop(handle, None) is not None

    def advance(self, delta_time: float) -> None:
        """Run one frame."""
        self.elapsed += delta_time
        # callbacks may detach themselves while running
        for callback in list(self._callbacks.values()):
            callback(delta_time)

    def __len__(self) -> int:
        return len(self._callbacks)
