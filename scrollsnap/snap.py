from __future__ import annotations
import logging
from typing import Any, List, Optional, Tuple

from scrollsnap.contracts import Disposer, GeometryProvider, ScrollEngine
from scrollsnap.lockout import LockoutController, SnapCallback
from scrollsnap.predictive import PredictiveSnapTrigger, Projection
from scrollsnap.reactive import ReactiveSnapTrigger
from scrollsnap.registry import AlignSpec, SnapPointRegistry
from scrollsnap.selector import NearestPointSelector
from scrollsnap.settings import SnapCfg
from scrollsnap.timers import TimerQueue
from scrollsnap.types import Align, Decision, ScrollSample, SnapPoint
from scrollsnap.velocity import VelocityClassifier

logger = logging.getLogger(__name__)


class Snap:
    """
    Scroll snapping on top of a smooth-scroll engine.

    Construction only wires objects together. Call attach() to start
    listening to the engine; destroy() undoes everything attach() and
    add_element() subscribed.

        snap = Snap(engine, geometry, SnapCfg(mode="proximity")).attach()
        snap.add_point(0)
        snap.add_element(block, align=["start", "end"])
        ...
        if not snap.handle_wheel(delta):
            engine.wheel(delta)
    """
    def __init__(self,
                 engine: ScrollEngine,
                 geometry: Optional[GeometryProvider] = None,
                 cfg: Optional[SnapCfg] = None,
                 timers: Optional[TimerQueue] = None,
                 on_snap_start: Optional[SnapCallback] = None,
                 on_snap_complete: Optional[SnapCallback] = None,
                 projection: Optional[Projection] = None):
        self.engine = engine
        self.cfg = cfg or SnapCfg()
        self.timers = timers or TimerQueue()

        self.registry = SnapPointRegistry(geometry)
        self.selector = NearestPointSelector(self.cfg.mode, self.cfg.default_threshold, self.cfg.threshold_policy)
        self.lockout = LockoutController(engine, self.timers,
                                         cooldown_ms=self.cfg.lockout_cooldown_ms,
                                         duration_ms=self.cfg.duration_ms,
                                         easing=self.cfg.easing,
                                         lerp=self.cfg.lerp,
                                         on_snap_start=on_snap_start,
                                         on_snap_complete=on_snap_complete)
        self.reactive = ReactiveSnapTrigger(engine, self.lockout, self.selector, self.snapshot, self.timers,
                                            classifier=VelocityClassifier(self.cfg.velocity_threshold),
                                            debounce_ms=self.cfg.debounce_ms)
        self.predictive = PredictiveSnapTrigger(engine, self.lockout, self.selector, self.snapshot, self.timers,
                                                cfg=self.cfg.predictive, projection=projection)
        self._disposers: List[Disposer] = []
        self._destroyed = False

    # --- lifecycle --------------------------------------------------------------
    def attach(self) -> "Snap":
        if self._destroyed:
            raise RuntimeError("Snap instance was destroyed")
        if not self._disposers:
            self.engine.on("scroll", self._on_scroll)
            self._disposers.append(lambda: self.engine.off("scroll", self._on_scroll))
        return self

    def start(self) -> None:
        self.registry.start()
        self.lockout.start()

    def stop(self) -> None:
        self.reactive.reset()
        self.registry.stop()
        self.lockout.stop()

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        logger.debug("destroying snap (%d points)", len(self.registry))
        self.reactive.reset()
        self.lockout.destroy()
        while self._disposers:
            self._disposers.pop()()
        self.registry.destroy()

    # --- registration -------------------------------------------------------------
    def add_point(self, position: float, user_data: Any = None, threshold: Optional[float] = None) -> int:
        return self.registry.add_point(position, user_data, threshold)

    def add_element(self, element: Any, align: AlignSpec = Align.START, threshold: Optional[float] = None,
                    user_data: Any = None, ignore_sticky: bool = True, ignore_transform: bool = False) -> int:
        return self.registry.add_element(element, align=align, threshold=threshold, user_data=user_data,
                                         ignore_sticky=ignore_sticky, ignore_transform=ignore_transform)

    def remove(self, token: int) -> None:
        self.registry.remove(token)

    # --- inputs -----------------------------------------------------------------
    def handle_wheel(self, delta: float) -> bool:
        """ Feed a raw wheel delta. True means: swallow the native scroll. """
        return self.predictive.on_wheel(delta)

    def snap_to_nearest(self, target: Optional[float] = None) -> Optional[Decision]:
        """ Evaluate once right now, outside the coasting detection. """
        return self.reactive.evaluate(target)

    def snapshot(self) -> Tuple[SnapPoint, ...]:
        limit = getattr(self.engine, "limit", None) if self.cfg.clamp_to_limit else None
        return self.registry.snapshot(self.engine.axis_extent,
                                      horizontal=bool(self.engine.is_horizontal),
                                      limit=limit,
                                      element_height_threshold=self.cfg.element_height_threshold)

    @property
    def is_locked(self) -> bool:
        return self.lockout.locked

    def _on_scroll(self, sample: ScrollSample) -> None:
        self.reactive.on_sample(sample)
