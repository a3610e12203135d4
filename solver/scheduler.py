"""
Tick schedulers.

The transient driver does not own a clock; it hands its frame callback
to a scheduler.  ``ManualScheduler`` fires only when told to (tests,
batch runs) and ``QtTimerScheduler`` fires from a Qt event loop, the way
an embedding UI paces its frames.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from PyQt6.QtCore import QTimer

from config import FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)


class TickScheduler(ABC):
    """Abstract periodic task: calls ``callback`` once per frame while active."""

    def __init__(self):
        self._callback: Optional[Callable[[], None]] = None

    @property
    @abstractmethod
    def active(self) -> bool:
        pass

    @abstractmethod
    def start(self, callback: Callable[[], None]):
        pass

    @abstractmethod
    def stop(self):
        pass


class ManualScheduler(TickScheduler):
    def __init__(self):
        super().__init__()
        self.fired = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback):
        self._callback = callback

    def stop(self):
        self._callback = None

    def fire(self, count: int = 1) -> int:
        """Invoke the callback up to ``count`` times; returns how many frames ran."""
        frames = 0
        for _ in range(count):
            # the callback may stop the scheduler
            if self._callback is None:
                break
            self._callback()
            frames += 1
        self.fired += frames
        return frames


class QtTimerScheduler(TickScheduler):
    """Frame scheduler backed by a ``QTimer`` on the owning thread's event loop."""

    def __init__(self, interval_ms: int = FRAME_INTERVAL_MS, parent=None):
        super().__init__()
        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def start(self, callback):
        self._callback = callback
        self._timer.start()
        logger.debug(f"Qt timer started with {self.interval_ms} ms interval")

    def stop(self):
        self._timer.stop()
        self._callback = None

    def _on_timeout(self):
        if self._callback is not None:
            self._callback()
