from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from scrollsnap.contracts import ScrollEngine
from scrollsnap.lockout import LockoutController
from scrollsnap.selector import NearestPointSelector
from scrollsnap.settings import PredictiveCfg
from scrollsnap.timers import TimerQueue
from scrollsnap.types import Decision, Initiator, SnapPoint

logger = logging.getLogger(__name__)

# (current position, wheel delta) -> projected resting position
Projection = Callable[[float, float], float]


@dataclass(frozen=True)
class LinearProjection:
    multiplier: float = 10.0

    def __call__(self, current: float, delta: float) -> float:
        return current + delta * self.multiplier


@dataclass(frozen=True)
class FrameDecayProjection:
    """
    Simulates momentum frame by frame: the wheel delta becomes a starting
    velocity that loses `friction` of itself every frame until it drops below
    epsilon or max_frames have run.
    """
    friction: float = 0.1
    max_frames: int = 200
    epsilon: float = 0.1
    velocity_scale: float = 1.0

    def __call__(self, current: float, delta: float) -> float:
        v = delta * self.velocity_scale
        projected = current
        for _ in range(self.max_frames):
            if abs(v) < self.epsilon:
                break
            v *= (1.0 - self.friction)
            projected += v
        return projected


def projection_from_cfg(cfg: PredictiveCfg) -> Projection:
    if cfg.projection == "decay":
        return FrameDecayProjection(friction=cfg.friction, max_frames=cfg.max_frames,
                                    epsilon=cfg.epsilon, velocity_scale=cfg.velocity_scale)
    return LinearProjection(multiplier=cfg.multiplier)


class PredictiveSnapTrigger:
    """
    Snaps ahead of time: every wheel delta is projected to where the scroll
    would come to rest, and if a snap point sits inside the look-ahead zone
    around that projection we go there straight away.

    on_wheel() returns True when it committed; the host must then drop the
    native scroll for that input.
    """
    def __init__(self,
                 engine: ScrollEngine,
                 lockout: LockoutController,
                 selector: NearestPointSelector,
                 snapshot: Callable[[], Sequence[SnapPoint]],
                 timers: TimerQueue,
                 cfg: Optional[PredictiveCfg] = None,
                 projection: Optional[Projection] = None):
        self.engine = engine
        self.lockout = lockout
        self.selector = selector
        self.snapshot = snapshot
        self.timers = timers
        self.cfg = cfg or PredictiveCfg()
        self.projection = projection or projection_from_cfg(self.cfg)
        self._last_commit_ms: Optional[float] = None

    def on_wheel(self, delta: float) -> bool:
        decision = self.decide(delta)
        if decision is None:
            return False
        self._last_commit_ms = self.timers.now()
        self.lockout.commit(decision, Initiator.PREDICTIVE)
        return True

    def decide(self, delta: float) -> Optional[Decision]:
        """ Everything on_wheel() does short of committing. """
        if not self.cfg.enabled or self.lockout.suspended or self.lockout.locked:
            return None
        if abs(delta) < self.cfg.noise_floor:
            return None
        if self._cooling_down():
            return None

        current = self.engine.current_position
        projected = self.projection(current, delta)
        radius = self.engine.axis_extent * self.cfg.zone_fraction
        decision = self.selector.select(projected, self.snapshot(), self.engine.axis_extent,
                                        accept_radius=radius)
        if decision is None:
            return None
        # Already resting on it: let the native scroll move us off.
        if abs(decision.position - current) < 1.0:
            return None
        logger.debug("wheel %.1f at %.1f projects to %.1f -> %.1f", delta, current, projected, decision.position)
        return decision

    def _cooling_down(self) -> bool:
        if self._last_commit_ms is None:
            return False
        return (self.timers.now() - self._last_commit_ms) < self.cfg.cooldown_ms
