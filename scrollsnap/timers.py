from __future__ import annotations
import heapq
import itertools
from typing import Callable, List, Optional, Tuple


class Timer:
    """ Handle for a scheduled callback. cancel() is safe to call at any time. """
    __slots__ = ("due", "callback", "_done")

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._done = False

    @property
    def active(self) -> bool:
        return not self._done

    def cancel(self) -> None:
        self._done = True

    def _fire(self) -> None:
        if self._done:
            return
        self._done = True
        self.callback()


class TimerQueue:
    """
    Cooperative, single-threaded timers.

    Nothing runs on its own: the host calls update(dt_ms) once per frame and
    every timer that has come due fires from inside that call, in due order
    (ties in scheduling order). Timers scheduled by a firing callback run in
    the same update() if they are already due.
    """
    def __init__(self, now: float = 0.0):
        self._now = float(now)
        self._heap: List[Tuple[float, int, Timer]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Timer:
        timer = Timer(self._now + max(0.0, float(delay_ms)), callback)
        heapq.heappush(self._heap, (timer.due, next(self._seq), timer))
        return timer

    def update(self, dt_ms: float) -> None:
        self.advance_to(self._now + max(0.0, float(dt_ms)))

    def advance_to(self, t_ms: float) -> None:
        target = max(self._now, float(t_ms))
        while self._heap and self._heap[0][0] <= target:
            due, _, timer = heapq.heappop(self._heap)
            self._now = max(self._now, due)
            timer._fire()
        self._now = target


class Debouncer:
    """
    Trailing-edge debounce on top of a TimerQueue. Each trigger() restarts the
    window; the callback runs once the window elapses without another trigger.
    A delay of 0 runs the callback synchronously.
    """
    def __init__(self, timers: TimerQueue, delay_ms: float, callback: Callable[[], None]):
        self.timers = timers
        self.delay_ms = max(0.0, float(delay_ms))
        self.callback = callback
        self._timer: Optional[Timer] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and self._timer.active

    def trigger(self) -> None:
        self.cancel()
        if self.delay_ms <= 0:
            self.callback()
            return
        self._timer = self.timers.call_later(self.delay_ms, self._fire)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        self.callback()
