from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional

from scrollsnap.host.anim import Animator, Glide, Motion, Tween, damp, resolve_easing
from scrollsnap.host.scroll_model import ScrollModel
from scrollsnap.types import Initiator, ScrollSample

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 600.0


class ScrollHandle:
    """ Returned by scroll_to(). Cancelling never fires on_complete. """
    def __init__(self, engine: "TweenScrollEngine", tween: Optional[Motion]):
        self._engine = engine
        self._tween = tween

    @property
    def active(self) -> bool:
        return self._tween is not None and not self._tween.cancelled and self._engine._tween is self._tween

    def cancel(self) -> None:
        if self.active:
            self._engine._stop_tween()


class TweenScrollEngine:
    """
    Small Lenis-style smooth scroller for one axis.

    Wheel input moves a target that the position eases toward every frame;
    scroll_to() runs a Tween instead, or a Glide when given a lerp.
    update(dt_ms) advances one frame and emits one ScrollSample to "scroll"
    listeners whenever the position moved (or just stopped moving). Samples
    from a scroll_to() carry the initiator passed in user_data; wheel-driven
    ones are USER.
    """
    def __init__(self, model: Optional[ScrollModel] = None, horizontal: bool = False,
                 lerp: float = 0.12, wheel_multiplier: float = 1.0):
        self.model = model or ScrollModel()
        self.is_horizontal = horizontal
        self.lerp = float(lerp)
        self.wheel_multiplier = float(wheel_multiplier)

        self.target = self.model.offset
        self.velocity = 0.0
        self.last_velocity = 0.0
        self.time_ms = 0.0

        self._listeners: Dict[str, List[Callable[[ScrollSample], None]]] = {}
        self._animator = Animator()
        self._tween: Optional[Motion] = None
        self._initiator = Initiator.NONE
        self._locked = False

    # --- properties read by the snap engine -------------------------------------
    @property
    def current_position(self) -> float:
        return self.model.offset

    @property
    def axis_extent(self) -> float:
        return self.model.extent

    @property
    def limit(self) -> float:
        return self.model.max()

    @property
    def is_animating(self) -> bool:
        return self._tween is not None

    # --- events -------------------------------------------------------------------
    def on(self, event: str, cb: Callable[[ScrollSample], None]) -> None:
        self._listeners.setdefault(event, []).append(cb)

    def off(self, event: str, cb: Callable[[ScrollSample], None]) -> None:
        cbs = self._listeners.get(event, [])
        if cb in cbs:
            cbs.remove(cb)

    def listener_count(self, event: str = "scroll") -> int:
        return len(self._listeners.get(event, []))

    # --- input ------------------------------------------------------------------
    def wheel(self, delta: float) -> None:
        """ Native wheel scroll. Ignored while a locking scroll_to() runs. """
        if self._locked:
            return
        self.target = self.model.clamped(self.target + delta * self.wheel_multiplier)
        self._initiator = Initiator.USER

    def resize(self, extent: float, content: Optional[float] = None) -> None:
        self.model.extent = float(extent)
        if content is not None:
            self.model.content = float(content)
        self.model.clamp()
        self.target = self.model.clamped(self.target)

    def scroll_to(self,
                  position: float,
                  *,
                  duration: Optional[float] = None,
                  easing: Any = None,
                  user_data: Optional[Dict[str, Any]] = None,
                  on_start: Optional[Callable[[], None]] = None,
                  on_complete: Optional[Callable[[], None]] = None,
                  lerp: Optional[float] = None,
                  lock: bool = True) -> ScrollHandle:
        """ lerp, when given, glides to the target instead of running a timed tween. """
        self._stop_tween()
        end = self.model.clamped(position)
        initiator = Initiator((user_data or {}).get("initiator", Initiator.NONE))
        duration_ms = DEFAULT_DURATION_MS if duration is None else max(0.0, float(duration))

        self.target = end
        self._initiator = initiator
        self._locked = lock
        if on_start:
            on_start()

        if duration_ms <= 0 and not lerp:
            self.model.offset = end
            self._finish()
            if on_complete:
                on_complete()
            return ScrollHandle(self, None)

        def done() -> None:
            self._finish()
            if on_complete:
                on_complete()

        if lerp:
            motion: Motion = Glide(self.model, "offset", end, float(lerp), on_done=done)
        else:
            motion = Tween(self.model, "offset", self.model.offset, end, duration_ms,
                           ease=resolve_easing(easing), on_done=done)
        self._tween = self._animator.add(motion)
        return ScrollHandle(self, self._tween)

    # --- frame ------------------------------------------------------------------
    def update(self, dt_ms: float) -> None:
        self.time_ms += dt_ms
        prev = self.model.offset
        # Tag the sample with whoever drove this frame, even if the
        # animation finishes inside it.
        initiator = self._initiator

        if self._tween is not None:
            self._animator.update(dt_ms)
        elif self.model.offset != self.target:
            # frame-rate independent exponential approach
            self.model.offset += (self.target - self.model.offset) * damp(self.lerp, dt_ms)
            if abs(self.target - self.model.offset) < 0.5:
                self.model.offset = self.target
        self.model.clamp()

        self.velocity = self.model.offset - prev
        if self.velocity != 0 or self.last_velocity != 0:
            self._emit(ScrollSample(position=self.model.offset, velocity=self.velocity,
                                    previous_velocity=self.last_velocity,
                                    initiator=initiator, timestamp=self.time_ms))
        self.last_velocity = self.velocity
        # the frame that reports the stop still belongs to its initiator
        if self._tween is None and self.model.offset == self.target and self.velocity == 0:
            self._initiator = Initiator.NONE

    # --- helpers ------------------------------------------------------------
    def _emit(self, sample: ScrollSample) -> None:
        for cb in list(self._listeners.get("scroll", [])):
            cb(sample)

    def _finish(self) -> None:
        self._tween = None
        self._locked = False
        self.target = self.model.offset

    def _stop_tween(self) -> None:
        if self._tween is None:
            return
        logger.debug("scroll_to interrupted at %.1f", self.model.offset)
        self._tween.cancel()
        self._finish()
