"""
Frame Loop (Qt Timer Host)
==========================
Drives a SimulationDriver from the Qt event loop.

Why is this file needed?
------------------------
The driver only exposes `tick(timestamp)`; something has to call it at a
display-like cadence. This host owns a repeating QTimer and a QElapsedTimer
and forwards the monotonic elapsed time (in seconds) on every timeout.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QElapsedTimer, QObject, QTimer

from bucketflow.controller.driver import SimulationDriver

logger = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL_MS = 16  # ~60 FPS


class FrameLoop(QObject):
    def __init__(
        self,
        driver: SimulationDriver,
        interval_ms: int = DEFAULT_FRAME_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.driver = driver
        self.frames = 0

        self._clock = QElapsedTimer()
        self._clock.start()

        self.timer = QTimer(self)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._on_frame)

    @property
    def is_active(self) -> bool:
        return self.timer.isActive()

    def start(self) -> None:
        self.driver.start()
        if not self.timer.isActive():
            logger.debug(f"Frame timer started ({self.timer.interval()} ms).")
            self.timer.start()

    def pause(self) -> None:
        self.timer.stop()
        self.driver.pause()

    def reset(self) -> None:
        self.timer.stop()
        self.frames = 0
        self.driver.reset()

    def _on_frame(self) -> None:
        self.frames += 1
        self.driver.tick(self._clock.nsecsElapsed() / 1e9)
