from __future__ import annotations
import logging
import math
from enum import Enum
from typing import Callable, Optional, Sequence

from scrollsnap.contracts import ScrollEngine
from scrollsnap.lockout import LockoutController
from scrollsnap.selector import NearestPointSelector
from scrollsnap.timers import Debouncer, TimerQueue
from scrollsnap.types import Decision, Initiator, ScrollSample, SnapPoint
from scrollsnap.velocity import VelocityClassifier

logger = logging.getLogger(__name__)


class ReactiveState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class ReactiveSnapTrigger:
    """
    Snaps after the fact: once the engine's samples show motion coasting to a
    stop, evaluate the nearest point to where the viewport is now.

        IDLE --coasting--> PENDING --debounce elapsed--> evaluate --> IDLE
                              |
                              +--non-coasting sample--> IDLE
    """
    def __init__(self,
                 engine: ScrollEngine,
                 lockout: LockoutController,
                 selector: NearestPointSelector,
                 snapshot: Callable[[], Sequence[SnapPoint]],
                 timers: TimerQueue,
                 classifier: Optional[VelocityClassifier] = None,
                 debounce_ms: float = 0.0):
        self.engine = engine
        self.lockout = lockout
        self.selector = selector
        self.snapshot = snapshot
        self.classifier = classifier or VelocityClassifier()
        self.state = ReactiveState.IDLE
        self._debounce = Debouncer(timers, debounce_ms, self._evaluate)

    def on_sample(self, sample: ScrollSample) -> None:
        if sample.self_generated:
            return
        if self.lockout.suspended or self.lockout.locked:
            self.reset()
            return

        if self.classifier.classify(sample).is_coasting:
            self.state = ReactiveState.PENDING
            self._debounce.trigger()
        elif self.state == ReactiveState.PENDING:
            self.reset()

    def reset(self) -> None:
        self._debounce.cancel()
        self.state = ReactiveState.IDLE

    def evaluate(self, target: Optional[float] = None) -> Optional[Decision]:
        """
        Run one decision now. target defaults to the engine's current
        position. Returns the committed decision, if any.
        """
        if self.lockout.suspended or self.lockout.locked:
            return None
        if target is None:
            target = math.ceil(self.engine.current_position)
        decision = self.selector.select(target, self.snapshot(), self.engine.axis_extent)
        if decision is None:
            return None
        self.lockout.commit(decision, Initiator.SNAP)
        return decision

    def _evaluate(self) -> None:
        self.state = ReactiveState.IDLE
        self.evaluate()
