from __future__ import annotations
from typing import Any, Callable, Dict, Optional, Protocol

from scrollsnap.types import Rect, ScrollSample

# Minimal protocols for the collaborators the core rides on. Nothing here
# imports pygame; the reference implementations live in scrollsnap.host.

Disposer = Callable[[], None]
ScrollListener = Callable[[ScrollSample], None]
RectListener = Callable[[Optional[Rect]], None]


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class ScrollEngine(Protocol):
    """
    Owns the actual pixel animation and emits one ScrollSample per frame.

    scroll_to() must tag the samples it produces with the initiator found in
    user_data["initiator"] so the snap engine can recognise its own motion.
    """
    current_position: float
    axis_extent: float
    is_horizontal: bool

    def on(self, event: str, cb: ScrollListener) -> None: ...
    def off(self, event: str, cb: ScrollListener) -> None: ...

    def scroll_to(
        self,
        position: float,
        *,
        duration: Optional[float] = None,
        easing: Any = None,             # easing name or callable, resolved by the engine
        user_data: Optional[Dict[str, Any]] = None,
        on_start: Optional[Callable[[], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        lerp: Optional[float] = None,    # glide instead of a timed animation
    ) -> Cancellable: ...


class GeometryProvider(Protocol):
    """
    Tracks the absolute rectangle of an element.

    observe() pushes the current rectangle (or None when unavailable) right
    away and again on every layout/resize change, until the returned disposer
    is called.
    """
    def observe(
        self,
        element: Any,
        callback: RectListener,
        *,
        ignore_sticky: bool = True,
        ignore_transform: bool = False,
    ) -> Disposer: ...
