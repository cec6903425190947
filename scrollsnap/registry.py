from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from scrollsnap.contracts import Disposer, GeometryProvider
from scrollsnap.types import Align, Rect, SnapPoint, Source

logger = logging.getLogger(__name__)

AlignSpec = Union[Align, str, Iterable[Union[Align, str]]]


def parse_aligns(raw: AlignSpec) -> List[Align]:
    """
    Accepts one alignment or many, as Align members or names. Unknown values
    are dropped with a warning; the rest still apply.
    """
    if isinstance(raw, (str, Align)):
        raw = [raw]
    out: List[Align] = []
    for a in raw:
        try:
            al = Align(a.lower() if isinstance(a, str) else a)
        except ValueError:
            logger.warning("Ignoring unknown snap alignment %r", a)
            continue
        if al not in out:
            out.append(al)
    return out


def aligned_position(rect: Rect, align: Align, axis_extent: float, horizontal: bool = False) -> float:
    start, length = (rect.left, rect.width) if horizontal else (rect.top, rect.height)
    if align == Align.START:
        return start
    if align == Align.CENTER:
        return start + length / 2 - axis_extent / 2
    return start + length - axis_extent


@dataclass(eq=False)
class _ExplicitEntry:
    position: float
    user_data: Any = None
    threshold: Optional[float] = None


@dataclass(eq=False)
class _ElementEntry:
    element: Any
    aligns: List[Align]
    threshold: Optional[float] = None
    user_data: Any = None
    rect: Optional[Rect] = None
    dispose: Optional[Disposer] = None

    def on_rect(self, rect: Optional[Rect]) -> None:
        # An unavailable rectangle keeps the last known one.
        if rect is not None:
            self.rect = rect


class SnapPointRegistry:
    """
    Arena of snap points. Tokens are plain ints issued by this registry only
    and never reused, so removal by a stale token is a harmless no-op.

    Element points are never cached as positions: snapshot() derives them from
    the last rectangle the geometry provider pushed.
    """
    def __init__(self, geometry: Optional[GeometryProvider] = None):
        self.geometry = geometry
        self.enabled = True
        self._next_id = 0
        self._points: Dict[int, _ExplicitEntry] = {}
        self._elements: Dict[int, _ElementEntry] = {}
        self._destroyed = False

    # --- registration -------------------------------------------------------
    def add_point(self, position: float, user_data: Any = None, threshold: Optional[float] = None) -> int:
        self._check_alive()
        token = self._issue()
        self._points[token] = _ExplicitEntry(float(position), user_data, threshold)
        return token

    def add_element(self,
                    element: Any,
                    align: AlignSpec = Align.START,
                    threshold: Optional[float] = None,
                    user_data: Any = None,
                    ignore_sticky: bool = True,
                    ignore_transform: bool = False) -> int:
        self._check_alive()
        if self.geometry is None:
            raise ValueError("add_element() needs a geometry provider")
        token = self._issue()
        entry = _ElementEntry(element=element, aligns=parse_aligns(align),
                              threshold=threshold,
                              user_data=element if user_data is None else user_data)
        self._elements[token] = entry
        entry.dispose = self.geometry.observe(element, entry.on_rect,
                                              ignore_sticky=ignore_sticky,
                                              ignore_transform=ignore_transform)
        return token

    def remove(self, token: int) -> None:
        self._points.pop(token, None)
        entry = self._elements.pop(token, None)
        if entry is not None:
            self._release(entry)

    def __len__(self) -> int:
        return len(self._points) + len(self._elements)

    # --- lifecycle ----------------------------------------------------------
    def start(self) -> None:
        self.enabled = True

    def stop(self) -> None:
        self.enabled = False

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        self.enabled = False
        for entry in self._elements.values():
            self._release(entry)
        self._elements.clear()
        self._points.clear()

    # --- evaluation ---------------------------------------------------------
    def snapshot(self,
                 axis_extent: float,
                 horizontal: bool = False,
                 limit: Optional[float] = None,
                 element_height_threshold: bool = False) -> Tuple[SnapPoint, ...]:
        """
        Every candidate for one decision: explicit points once, each element
        once per alignment. Explicit points come first, then elements, each in
        registration order, so ties resolve deterministically.
        """
        if not self.enabled:
            return ()
        out: List[SnapPoint] = []
        for token, p in self._points.items():
            out.append(SnapPoint(id=token, position=self._clamp(p.position, limit),
                                 user_data=p.user_data, source=Source.EXPLICIT,
                                 threshold_override=p.threshold))
        for token, e in self._elements.items():
            if e.rect is None:
                continue
            threshold = e.threshold
            if threshold is None and element_height_threshold:
                threshold = e.rect.width if horizontal else e.rect.height
            for al in e.aligns:
                value = math.ceil(aligned_position(e.rect, al, axis_extent, horizontal))
                out.append(SnapPoint(id=token, position=self._clamp(float(value), limit),
                                     user_data=e.user_data, source=Source.ELEMENT,
                                     threshold_override=threshold, align=al))
        return tuple(out)

    # --- helpers ------------------------------------------------------------
    def _check_alive(self) -> None:
        if self._destroyed:
            raise RuntimeError("snap point registry was destroyed")

    def _issue(self) -> int:
        token = self._next_id
        self._next_id += 1
        return token

    @staticmethod
    def _clamp(value: float, limit: Optional[float]) -> float:
        if limit is None:
            return value
        return max(0.0, min(float(limit), value))

    @staticmethod
    def _release(entry: _ElementEntry) -> None:
        if entry.dispose is not None:
            dispose, entry.dispose = entry.dispose, None
            dispose()
