import unittest

from scrollsnap.lockout import LockoutController
from scrollsnap.tests.fakes import FakeEngine
from scrollsnap.timers import TimerQueue
from scrollsnap.types import Decision, Initiator, SnapMode, SnapPoint


def decision(pos: float) -> Decision:
    return Decision(chosen_point=SnapPoint(id=0, position=pos), distance=0.0,
                    effective_threshold=600.0, mode=SnapMode.MANDATORY)


class TestLockoutController(unittest.TestCase):
    def setUp(self):
        self.engine = FakeEngine()
        self.timers = TimerQueue()
        self.started, self.completed = [], []
        self.lock = LockoutController(self.engine, self.timers, cooldown_ms=100, duration_ms=400,
                                      easing="out_cubic",
                                      on_snap_start=self.started.append,
                                      on_snap_complete=self.completed.append)

    def test_commit_locks_and_tags_initiator(self):
        session = self.lock.commit(decision(300), Initiator.PREDICTIVE)
        self.assertTrue(self.lock.locked)
        self.assertTrue(session.locked)
        call = self.engine.calls[-1]
        self.assertEqual(call.position, 300)
        self.assertEqual(call.kwargs["user_data"], {"initiator": Initiator.PREDICTIVE})
        self.assertEqual(call.kwargs["duration"], 400)
        self.assertEqual(call.kwargs["easing"], "out_cubic")
        self.assertEqual([d.position for d in self.started], [300])

    def test_lerp_is_forwarded(self):
        self.lock.commit(decision(100))
        self.assertIsNone(self.engine.calls[-1].kwargs["lerp"])
        lock = LockoutController(self.engine, self.timers, lerp=0.1)
        lock.commit(decision(300))
        self.assertEqual(self.engine.calls[-1].kwargs["lerp"], 0.1)

    def test_cooldown_outlasts_completion(self):
        self.lock.commit(decision(300))
        self.timers.update(400)
        self.engine.complete()
        self.assertIsNone(self.lock.session)
        self.assertTrue(self.lock.locked)
        self.assertEqual([d.position for d in self.completed], [300])
        self.timers.update(99)
        self.assertTrue(self.lock.locked)
        self.timers.update(1)
        self.assertFalse(self.lock.locked)

    def test_new_commit_cancels_previous_animation(self):
        self.lock.commit(decision(300))
        first = self.engine.calls[-1].handle
        self.lock.commit(decision(900))
        self.assertEqual(first.cancelled, 1)
        # the stale completion must not end the new session
        self.engine.complete(0)
        self.assertIsNotNone(self.lock.session)
        self.assertEqual(self.lock.session.target.position, 900)
        self.assertEqual(self.completed, [])

    def test_cancel_unlocks_immediately(self):
        self.lock.commit(decision(300))
        handle = self.engine.calls[-1].handle
        self.lock.cancel()
        self.assertEqual(handle.cancelled, 1)
        self.assertFalse(self.lock.locked)

    def test_cancel_without_session_is_noop(self):
        self.lock.cancel()
        self.assertFalse(self.lock.locked)

    def test_zero_cooldown_unlocks_on_completion(self):
        lock = LockoutController(self.engine, self.timers, cooldown_ms=0)
        lock.commit(decision(10))
        self.engine.complete()
        self.assertFalse(lock.locked)

    def test_synchronous_completion(self):
        class InstantEngine(FakeEngine):
            def scroll_to(self, position, **kwargs):
                handle = super().scroll_to(position, **kwargs)
                kwargs["on_complete"]()
                return handle

        lock = LockoutController(InstantEngine(), self.timers, cooldown_ms=50)
        lock.commit(decision(10))
        self.assertIsNone(lock.session)
        self.assertTrue(lock.locked)
        lock.commit(decision(20))  # must not try to cancel the finished handle
        self.assertEqual(lock.engine.calls[0].handle.cancelled, 0)

    def test_stop_start_suspends(self):
        self.lock.stop()
        self.assertTrue(self.lock.suspended)
        self.lock.start()
        self.assertFalse(self.lock.suspended)


if __name__ == "__main__":
    unittest.main()
