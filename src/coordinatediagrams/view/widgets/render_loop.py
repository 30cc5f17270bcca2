"""
Render Loop
===========
Repeating, cancellable render tick driven by the Qt event loop.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from coordinatediagrams import config

logger = logging.getLogger(__name__)


class RenderLoop:
    """
    Calls `callback` every `interval_ms` milliseconds while running.

    A cancelled loop never calls the callback again, even if a timeout is
    already queued in the event loop.
    """
    def __init__(
        self,
        callback: Callable[[], None],
        interval_ms: int = config.FRAME_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        self._callback = callback
        self.running: bool = False
        self.tick_count: int = 0

        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.tick)

    @property
    def interval(self) -> int:
        return self._timer.interval()

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self._timer.start()
        logger.debug("Render loop started (%d ms).", self._timer.interval())

    def cancel(self) -> None:
        if not self.running:
            return
        self.running = False
        self._timer.stop()
        logger.debug("Render loop cancelled after %d ticks.", self.tick_count)

    def tick(self) -> None:
        if not self.running:
            return
        self.tick_count += 1
        self._callback()
