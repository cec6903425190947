from __future__ import annotations

import logging
from typing import List, Optional

import pygame

from scrollsnap.host.layout import Block, BlockLayout
from scrollsnap.host.scroll_engine import TweenScrollEngine
from scrollsnap.host.scroll_model import ScrollModel
from scrollsnap.settings import AppCfg
from scrollsnap.snap import Snap
from scrollsnap.timers import TimerQueue
from scrollsnap.types import Decision, Initiator, SnapMode

logger = logging.getLogger(__name__)

DEFAULT_BLOCKS = [
    {"height": 520, "align": "start"},
    {"height": 300, "align": ["start", "center"]},
    {"height": 900, "align": ["start", "end"]},
    {"height": 420, "align": "center", "threshold": 300},
    {"height": 640, "align": "start"},
]

PALETTE = [(52, 86, 139), (111, 63, 107), (63, 112, 89), (140, 98, 57), (86, 86, 104)]


def jump_to(engine: TweenScrollEngine, position: float) -> None:
    """ Animated Home/End jump, tagged as snap motion. """
    engine.scroll_to(position, user_data={"initiator": Initiator.SNAP})


class DemoApp:
    """
    Vertical page of coloured blocks with snapping wired in. The wheel goes
    through Snap.handle_wheel() first and only reaches the scroll engine when
    the predictive trigger passes on it.

    Keys: S start/stop snapping, M toggle mandatory/proximity,
          Home/End jump, Ctrl+Q quit.
    """

    def __init__(self, cfg: AppCfg):
        self.cfg = cfg
        pygame.init()
        pygame.display.set_caption(cfg.window.title)

        self._flags = pygame.RESIZABLE | pygame.DOUBLEBUF
        self.screen = pygame.display.set_mode(
            (int(cfg.window.width), int(cfg.window.height)),
            flags=self._flags,
        )
        self.font = pygame.font.Font(None, 22)
        self.clock = pygame.time.Clock()
        self.running = True

        # Scroll host
        self.engine = TweenScrollEngine(ScrollModel(extent=float(cfg.window.height)),
                                        lerp=cfg.host.lerp, wheel_multiplier=cfg.host.wheel_multiplier)
        self.layout = BlockLayout(scroll_position=lambda: self.engine.current_position,
                                  width=float(cfg.window.width))
        self.timers = TimerQueue()

        # Snapping
        self.snap = Snap(self.engine, self.layout, cfg.snap, self.timers,
                         on_snap_start=self._on_snap_start,
                         on_snap_complete=self._on_snap_complete).attach()
        self.blocks: List[Block] = self._build_blocks(cfg.blocks or DEFAULT_BLOCKS)
        self.engine.resize(cfg.window.height, self.layout.content_height())
        self.last_decision: Optional[Decision] = None

    def _build_blocks(self, items: list) -> List[Block]:
        blocks = self.layout.stack([float(s.get("height", 400)) for s in items], gap=24.0)
        for block, item in zip(blocks, items):
            self.snap.add_element(block, align=item.get("align", "start"), threshold=item.get("threshold"))
        return blocks

    # ------------------------------------------------------------------ #
    # Main loop
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        try:
            while self.running:
                dt_ms = float(self.clock.tick(self.cfg.fps))

                for e in pygame.event.get():
                    self.handle_event(e)

                # timers first so cooldowns expire before this frame's samples
                self.timers.update(dt_ms)
                self.engine.update(dt_ms)
                self.draw()
                pygame.display.flip()
        finally:
            self.snap.destroy()
            pygame.quit()

    def handle_event(self, e: pygame.event.Event) -> None:
        if e.type == pygame.QUIT:
            self.running = False
        elif e.type == pygame.VIDEORESIZE:
            self._resize_to(e.w, e.h)
        elif e.type == pygame.MOUSEWHEEL:
            delta = -e.y * self.cfg.host.wheel_step_px
            if not self.snap.handle_wheel(delta):
                self.engine.wheel(delta)
        elif e.type == pygame.KEYDOWN:
            self._handle_key(e.key)

    def _handle_key(self, key: int) -> None:
        if key == pygame.K_s:
            if self.snap.lockout.suspended:
                self.snap.start()
            else:
                self.snap.stop()
            logger.info("snapping %s", "off" if self.snap.lockout.suspended else "on")
        elif key == pygame.K_m:
            sel = self.snap.selector
            sel.mode = SnapMode.PROXIMITY if sel.mode == SnapMode.MANDATORY else SnapMode.MANDATORY
            logger.info("mode -> %s", sel.mode.value)
        elif key == pygame.K_HOME:
            jump_to(self.engine, 0.0)
        elif key == pygame.K_END:
            jump_to(self.engine, self.engine.limit)
        elif key == pygame.K_q and (pygame.key.get_mods() & pygame.KMOD_CTRL):
            self.running = False

    # ------------------------------------------------------------------ #
    # Drawing
    # ------------------------------------------------------------------ #
    def draw(self) -> None:
        self.screen.fill(self.cfg.window.bg_rgb)
        offset = self.engine.current_position
        w, h = self.screen.get_size()

        for i, block in enumerate(self.blocks):
            rect = self.layout.measure(block)
            if rect is None:
                continue
            y = int(round(rect.top - offset))
            if y > h or y + rect.height < 0:
                continue
            r = pygame.Rect(24, y, w - 48, int(rect.height))
            pygame.draw.rect(self.screen, PALETTE[i % len(PALETTE)], r, border_radius=12)
            label = self.font.render(f"{block.name}  top={rect.top:.0f}  h={rect.height:.0f}", True, (235, 235, 240))
            self.screen.blit(label, (r.x + 14, r.y + 12))

        # snap targets along the right edge
        for point in self.snap.snapshot():
            y = int(round(point.position - offset))
            pygame.draw.line(self.screen, (240, 200, 90), (w - 18, y), (w - 6, y), 2)

        self._draw_status(w)

    def _draw_status(self, w: int) -> None:
        snap = self.snap
        state = "stopped" if snap.lockout.suspended else ("locked" if snap.is_locked else "idle")
        parts = [f"mode={snap.selector.mode.value}", f"state={state}", f"pos={self.engine.current_position:.0f}"]
        if self.last_decision is not None:
            parts.append(f"last={self.last_decision.position:.0f}")
        text = self.font.render("   ".join(parts), True, (200, 202, 210))
        bg = pygame.Rect(0, 0, w, text.get_height() + 12)
        pygame.draw.rect(self.screen, (8, 8, 10), bg)
        self.screen.blit(text, (12, 6))

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _resize_to(self, w: int, h: int) -> None:
        w = max(1, int(w))
        h = max(1, int(h))
        self.screen = pygame.display.set_mode((w, h), flags=self._flags)
        self.layout.width = float(w)
        for block in self.blocks:
            block.width = float(w)
        self.layout.relayout()
        self.engine.resize(h, self.layout.content_height())

    def _on_snap_start(self, decision: Decision) -> None:
        logger.debug("snap start -> %.0f", decision.position)

    def _on_snap_complete(self, decision: Decision) -> None:
        self.last_decision = decision
        logger.info("snapped to %.0f (%s)", decision.position, getattr(decision.chosen_point.user_data, "name", "point"))
