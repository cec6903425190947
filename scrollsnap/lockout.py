from __future__ import annotations
import logging
from typing import Any, Callable, Optional

from scrollsnap.contracts import Cancellable, ScrollEngine
from scrollsnap.timers import Timer, TimerQueue
from scrollsnap.types import Decision, Initiator, SnapSession

logger = logging.getLogger(__name__)

SnapCallback = Callable[[Decision], None]


class LockoutController:
    """
    Owns the single SnapSession and the lock around it.

    Locked means: a session is animating, or its completion cooldown is still
    running. Both triggers check `locked` and `suspended` before doing any
    work, and since every callback runs to completion on one thread that
    check-then-commit needs no mutex.
    """
    def __init__(self,
                 engine: ScrollEngine,
                 timers: TimerQueue,
                 cooldown_ms: float = 150.0,
                 duration_ms: Optional[float] = None,
                 easing: Any = None,
                 lerp: Optional[float] = None,
                 on_snap_start: Optional[SnapCallback] = None,
                 on_snap_complete: Optional[SnapCallback] = None):
        self.engine = engine
        self.timers = timers
        self.cooldown_ms = max(0.0, float(cooldown_ms))
        self.duration_ms = duration_ms
        self.easing = easing
        self.lerp = lerp
        self.on_snap_start = on_snap_start
        self.on_snap_complete = on_snap_complete

        self.suspended = False
        self._session: Optional[SnapSession] = None
        self._handle: Optional[Cancellable] = None
        self._cooldown: Optional[Timer] = None

    # --- state ----------------------------------------------------------------
    @property
    def session(self) -> Optional[SnapSession]:
        return self._session

    @property
    def locked(self) -> bool:
        if self._session is not None and self._session.locked:
            return True
        return self._cooldown is not None and self._cooldown.active

    def start(self) -> None:
        self.suspended = False

    def stop(self) -> None:
        self.suspended = True

    # --- sessions -------------------------------------------------------------
    def commit(self, decision: Decision, initiator: Initiator = Initiator.SNAP) -> SnapSession:
        """
        Start a snap animation to decision.position. Any animation still in
        flight is cancelled first so two tweens never drive the viewport.
        """
        if self._session is not None:
            logger.debug("cancelling in-flight snap to %.1f", self._session.target.position)
            self._cancel_animation()
        self._clear_cooldown()

        session = SnapSession(target=decision, start_time=self.timers.now(), initiator=initiator)
        self._session = session
        logger.debug("%s snap to %.1f (distance %.1f)", initiator.value, decision.position, decision.distance)

        handle = self.engine.scroll_to(
            decision.position,
            duration=self.duration_ms,
            easing=self.easing,
            lerp=self.lerp,
            user_data={"initiator": initiator},
            on_start=lambda: self._started(session),
            on_complete=lambda: self._completed(session),
        )
        # scroll_to() may complete synchronously (zero duration); keep the
        # handle only while its session is still the live one.
        self._handle = handle if self._session is session else None
        return session

    def cancel(self) -> None:
        """ Abort the current session and unlock right away. No-op without one. """
        if self._session is None:
            return
        self._cancel_animation()
        self._clear_cooldown()

    def destroy(self) -> None:
        self.cancel()
        self._clear_cooldown()
        self.suspended = True

    # --- engine callbacks -------------------------------------------------------
    def _started(self, session: SnapSession) -> None:
        if session is self._session and self.on_snap_start:
            self.on_snap_start(session.target)

    def _completed(self, session: SnapSession) -> None:
        if session is not self._session:
            return  # completion of a cancelled animation
        # The cooldown takes over the lock before the session goes away.
        if self.cooldown_ms > 0:
            self._cooldown = self.timers.call_later(self.cooldown_ms, self._cooldown_elapsed)
        session.locked = False
        self._session = None
        self._handle = None
        if self.on_snap_complete:
            self.on_snap_complete(session.target)

    def _cooldown_elapsed(self) -> None:
        self._cooldown = None
        logger.debug("snap lockout released")

    # --- helpers ------------------------------------------------------------
    def _cancel_animation(self) -> None:
        session, handle = self._session, self._handle
        self._session = None
        self._handle = None
        if session is not None:
            session.locked = False
        if handle is not None:
            handle.cancel()

    def _clear_cooldown(self) -> None:
        if self._cooldown is not None:
            self._cooldown.cancel()
            self._cooldown = None
