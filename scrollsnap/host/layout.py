from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from scrollsnap.contracts import Disposer, RectListener
from scrollsnap.types import Rect


@dataclass(eq=False)
class Block:
    """
    A laid-out box. offset_* are relative to the parent's box; translate_*
    is a visual transform on top of the layout position. A sticky block
    pins to `sticky_top` inside the viewport once scrolled past its static
    position.
    """
    name: str
    width: float = 0.0
    height: float = 0.0
    offset_top: float = 0.0
    offset_left: float = 0.0
    parent: Optional["Block"] = None
    sticky: bool = False
    sticky_top: float = 0.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    visible: bool = True
    children: List["Block"] = field(default_factory=list)


class BlockLayout:
    """
    Geometry provider over a tree of Blocks.

    observe() pushes the block's absolute rect immediately and again after
    every relayout()/resize(); hidden blocks report None. Absolute positions
    walk the ancestor chain with a plain loop, so depth is only bounded by the
    tree itself.
    """
    def __init__(self, scroll_position: Callable[[], float] = lambda: 0.0, width: float = 0.0):
        self.scroll_position = scroll_position
        self.width = width
        self.roots: List[Block] = []
        self._observers: Dict[int, Tuple[Block, RectListener, bool, bool]] = {}
        self._next = 0

    # --- building ---------------------------------------------------------------
    def add(self, block: Block, parent: Optional[Block] = None) -> Block:
        block.parent = parent
        (parent.children if parent else self.roots).append(block)
        return block

    def stack(self, heights: List[float], gap: float = 0.0, parent: Optional[Block] = None) -> List[Block]:
        """ Append blocks in normal flow, one under the other. """
        siblings = parent.children if parent else self.roots
        y = max((b.offset_top + b.height for b in siblings), default=0.0)
        if siblings:
            y += gap
        out = []
        for h in heights:
            b = self.add(Block(name=f"block{len(siblings)}", width=self.width, height=float(h), offset_top=y), parent)
            out.append(b)
            y += float(h) + gap
        return out

    def content_height(self) -> float:
        return max((b.offset_top + b.height for b in self.roots), default=0.0)

    # --- measurement --------------------------------------------------------------
    def measure(self, block: Block, ignore_sticky: bool = True, ignore_transform: bool = False) -> Optional[Rect]:
        if not block.visible:
            return None
        top = left = 0.0
        node: Optional[Block] = block
        while node is not None:
            top += node.offset_top
            left += node.offset_left
            if not ignore_transform:
                top += node.translate_y
                left += node.translate_x
            node = node.parent
        if block.sticky and not ignore_sticky:
            # where the pinned box is drawn right now, in document coordinates
            top = max(top, self.scroll_position() + block.sticky_top)
        return Rect(top=top, left=left, width=block.width, height=block.height)

    # --- GeometryProvider ---------------------------------------------------------
    def observe(self, element: Block, callback: RectListener, *,
                ignore_sticky: bool = True, ignore_transform: bool = False) -> Disposer:
        key = self._next
        self._next += 1
        self._observers[key] = (element, callback, ignore_sticky, ignore_transform)
        callback(self.measure(element, ignore_sticky, ignore_transform))

        def dispose() -> None:
            self._observers.pop(key, None)
        return dispose

    def observer_count(self) -> int:
        return len(self._observers)

    # --- changes ------------------------------------------------------------------
    def resize(self, block: Block, width: Optional[float] = None, height: Optional[float] = None) -> None:
        """ Resize a block and re-flow the siblings after it. """
        old_h = block.height
        if width is not None:
            block.width = float(width)
        if height is not None:
            block.height = float(height)
        dh = block.height - old_h
        if dh:
            siblings = block.parent.children if block.parent else self.roots
            for sib in siblings:
                if sib is not block and sib.offset_top >= block.offset_top + old_h:
                    sib.offset_top += dh
        self.relayout()

    def relayout(self) -> None:
        for element, cb, ignore_sticky, ignore_transform in list(self._observers.values()):
            cb(self.measure(element, ignore_sticky, ignore_transform))
