"""
Delayed reveal of system guesses ("System is thinking...").

The session commits to a guess immediately; this queue only decides when the
presentation layer gets to show it. Each entry remembers the epoch it was
scheduled under. If the session has moved on (reset or a new start) by the
time the entry is due, the entry is dropped instead of revealed.
"""

import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, List

from .events import SystemGuessed

logger = logging.getLogger(__name__)


@dataclass
class _Pending:
    due_at: float
    event: SystemGuessed


class RevealQueue:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._pending: List[_Pending] = []
        self._lock = Lock()

    def schedule(self, event: SystemGuessed, delay: float) -> None:
        with self._lock:
            self._pending.append(_Pending(self._clock() + max(delay, 0.0), event))

    def due(self, current_epoch: int) -> List[SystemGuessed]:
        """Pop every entry whose delay has passed; stale epochs are discarded."""
        now = self._clock()
        ready: List[SystemGuessed] = []
        with self._lock:
            keep: List[_Pending] = []
            for item in self._pending:
                if item.event.epoch != current_epoch:
                    logger.debug("dropping stale reveal of %s (epoch %d, now %d)",
                                 item.event.code, item.event.epoch, current_epoch)
                elif item.due_at <= now:
                    ready.append(item.event)
                else:
                    keep.append(item)
            self._pending = keep
        return ready

    def cancel_all(self) -> None:
        with self._lock:
            self._pending = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
