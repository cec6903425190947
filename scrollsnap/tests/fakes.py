from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from scrollsnap.types import Initiator, Rect, ScrollSample


@dataclass(eq=False)
class FakeHandle:
    cancelled: int = 0

    def cancel(self) -> None:
        self.cancelled += 1


@dataclass
class ScrollCall:
    position: float
    kwargs: Dict[str, Any]
    handle: FakeHandle


class FakeEngine:
    """ Records scroll_to() calls; the test decides when animations complete. """
    def __init__(self, position: float = 0.0, extent: float = 600.0, horizontal: bool = False):
        self.current_position = position
        self.axis_extent = extent
        self.is_horizontal = horizontal
        self.calls: List[ScrollCall] = []
        self.listeners: List[Callable[[ScrollSample], None]] = []
        self.subscribed = 0
        self.unsubscribed = 0

    def on(self, event: str, cb) -> None:
        self.subscribed += 1
        self.listeners.append(cb)

    def off(self, event: str, cb) -> None:
        self.unsubscribed += 1
        if cb in self.listeners:
            self.listeners.remove(cb)

    def scroll_to(self, position, **kwargs) -> FakeHandle:
        handle = FakeHandle()
        self.calls.append(ScrollCall(position, kwargs, handle))
        if kwargs.get("on_start"):
            kwargs["on_start"]()
        return handle

    def complete(self, index: int = -1) -> None:
        call = self.calls[index]
        self.current_position = call.position
        if call.kwargs.get("on_complete"):
            call.kwargs["on_complete"]()

    def emit(self, velocity: float, previous: float, initiator: Initiator = Initiator.USER) -> None:
        sample = ScrollSample(position=self.current_position, velocity=velocity,
                              previous_velocity=previous, initiator=initiator)
        for cb in list(self.listeners):
            cb(sample)


class FakeGeometry:
    """ Geometry provider with hand-set rects and subscription counting. """
    def __init__(self, rects: Optional[Dict[Any, Optional[Rect]]] = None):
        self.rects: Dict[Any, Optional[Rect]] = dict(rects or {})
        self.callbacks: Dict[Any, List[Callable]] = {}
        self.subscribed = 0
        self.unsubscribed = 0
        self.options: List[Dict[str, bool]] = []

    def observe(self, element, callback, *, ignore_sticky=True, ignore_transform=False):
        self.subscribed += 1
        self.options.append({"ignore_sticky": ignore_sticky, "ignore_transform": ignore_transform})
        self.callbacks.setdefault(element, []).append(callback)
        callback(self.rects.get(element))

        def dispose():
            self.unsubscribed += 1
            self.callbacks[element].remove(callback)
        return dispose

    def push(self, element, rect: Optional[Rect]) -> None:
        self.rects[element] = rect
        for cb in list(self.callbacks.get(element, [])):
            cb(rect)

    @property
    def active(self) -> int:
        return self.subscribed - self.unsubscribed
