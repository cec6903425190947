from dataclasses import dataclass
from typing import Callable, Any, Dict, Union

FRAME_MS = 1000.0 / 60.0

def ease_linear(t: float) -> float: return t
def ease_out_cubic(t: float) -> float: t = max(0.0, min(1.0, t)); return 1 - (1 - t) ** 3
def ease_in_out_cubic(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return 4 * t ** 3 if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2
def ease_out_expo(t: float) -> float:
    # Lenis' default feel
    t = max(0.0, min(1.0, t))
    return 1.0 if t >= 1.0 else 1 - 2 ** (-10 * t)

EASINGS: Dict[str, Callable[[float], float]] = {
    "linear": ease_linear,
    "out_cubic": ease_out_cubic,
    "in_out_cubic": ease_in_out_cubic,
    "out_expo": ease_out_expo,
}

def resolve_easing(ease: Any) -> Callable[[float], float]:
    if callable(ease):
        return ease
    if ease is None:
        return ease_out_cubic
    try:
        return EASINGS[str(ease)]
    except KeyError:
        raise ValueError(f"Unknown easing {ease!r}; expected one of {', '.join(EASINGS)}") from None

@dataclass(eq=False)
class Tween:
    """ Drives obj.attr from start to end over duration_ms. """
    obj: Any
    attr: str
    start: float
    end: float
    duration_ms: float
    ease: Callable[[float], float] = ease_out_cubic
    t: float = 0.0
    on_done: Callable[[], None] | None = None
    cancelled: bool = False

    def cancel(self) -> None:
        # on_done never runs for a cancelled tween
        self.cancelled = True

    def update(self, dt_ms: float) -> bool:
        if self.cancelled:
            return True
        self.t += dt_ms
        u = 1.0 if self.duration_ms <= 0 else max(0.0, min(1.0, self.t / self.duration_ms))
        v = self.start + (self.end - self.start) * self.ease(u)
        setattr(self.obj, self.attr, v)
        finished = (u >= 1.0)
        if finished and self.on_done:
            self.on_done()
        return finished

def damp(lerp: float, dt_ms: float) -> float:
    """ Fraction of the remaining distance covered in dt_ms, for a per-60fps-frame lerp. """
    return 1.0 - (1.0 - lerp) ** (dt_ms / FRAME_MS)

@dataclass(eq=False)
class Glide:
    """ Eases obj.attr toward end by `lerp` per frame until it is within `settle` of it. """
    obj: Any
    attr: str
    end: float
    lerp: float
    settle: float = 0.5
    on_done: Callable[[], None] | None = None
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def update(self, dt_ms: float) -> bool:
        if self.cancelled:
            return True
        v = getattr(self.obj, self.attr)
        v += (self.end - v) * damp(self.lerp, dt_ms)
        finished = abs(self.end - v) < self.settle
        setattr(self.obj, self.attr, self.end if finished else v)
        if finished and self.on_done:
            self.on_done()
        return finished

Motion = Union[Tween, Glide]

class Animator:
    def __init__(self):
        self._tweens: list[Motion] = []

    def add(self, tween: Motion) -> Motion:
        self._tweens.append(tween)
        return tween

    def update(self, dt_ms: float) -> None:
        # on_done may add tweens while we iterate; only drop the finished ones
        done = [tw for tw in list(self._tweens) if tw.update(dt_ms)]
        self._tweens[:] = [tw for tw in self._tweens if tw not in done]

    def active(self) -> bool:
        return any(not tw.cancelled for tw in self._tweens)

    def cancel_all(self) -> None:
        for tw in self._tweens:
            tw.cancel()
        self._tweens.clear()
