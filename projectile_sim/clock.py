"""
Frame Clock
===========
Cooperative, single-threaded tick scheduler standing in for a display
refresh timer.

Callbacks are one-shot: schedule() queues a callback for the next
step(), and a callback that wants to keep running reschedules itself.
Anything scheduled while a step is running waits for the following
step. cancel() removes a pending callback immediately, even one that
is due later in the step currently running.
"""

import itertools
from typing import Callable, Dict, Optional


class FrameClock:

    def __init__(self, frame_rate: float = 60.0):
        if frame_rate <= 0:
            raise ValueError("frame_rate must be positive")
        self.frame_rate = frame_rate
        self.frame = 0
        self._pending: Dict[int, Callable[[], None]] = {}
        self._due: Dict[int, Callable[[], None]] = {}
        self._handles = itertools.count(1)

    @property
    def dt(self) -> float:
        """Seconds per frame."""
        return 1.0 / self.frame_rate

    @property
    def elapsed(self) -> float:
        return self.frame * self.dt

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule(self, callback: Callable[[], None]) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: Optional[int]) -> bool:
        if handle is None:
            return False
        if self._due.pop(handle, None) is not None:
            return True
        return self._pending.pop(handle, None) is not None

    def step(self) -> int:
        """Advance one frame; returns the number of callbacks run."""
        self._due = self._pending
        self._pending = {}
        self.frame += 1
        ran = 0
        while self._due:
            handle = next(iter(self._due))
            callback = self._due.pop(handle)
            callback()
            ran += 1
        return ran

    def run(self, max_frames: int,
            until: Optional[Callable[[], bool]] = None) -> int:
        """
        Step until `until()` is true, nothing is pending, or `max_frames`
        frames have run. Returns the number of frames stepped.
        """
        frames = 0
        while frames < max_frames and self._pending:
            if until is not None and until():
                break
            self.step()
            frames += 1
        return frames
