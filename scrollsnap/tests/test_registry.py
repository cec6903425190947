import unittest

from scrollsnap.registry import SnapPointRegistry, aligned_position, parse_aligns
from scrollsnap.tests.fakes import FakeGeometry
from scrollsnap.types import Align, Rect, Source


class TestAlignment(unittest.TestCase):
    def test_vertical_positions(self):
        r = Rect(top=1000, left=50, width=300, height=400)
        self.assertEqual(aligned_position(r, Align.START, 600), 1000)
        self.assertEqual(aligned_position(r, Align.CENTER, 600), 1000 + 200 - 300)
        self.assertEqual(aligned_position(r, Align.END, 600), 1000 + 400 - 600)

    def test_horizontal_uses_left_and_width(self):
        r = Rect(top=1000, left=50, width=300, height=400)
        self.assertEqual(aligned_position(r, Align.START, 200, horizontal=True), 50)
        self.assertEqual(aligned_position(r, Align.END, 200, horizontal=True), 150)

    def test_parse_drops_unknown_values(self):
        with self.assertLogs("scrollsnap.registry", level="WARNING"):
            aligns = parse_aligns(["start", "middle", "END", Align.START])
        self.assertEqual(aligns, [Align.START, Align.END])
        self.assertEqual(parse_aligns("center"), [Align.CENTER])

    def test_parse_rejects_none(self):
        self.assertEqual(parse_aligns([]), [])
        with self.assertRaises(TypeError):
            parse_aligns(None)


class TestExplicitPoints(unittest.TestCase):
    def test_tokens_are_unique_and_removable(self):
        reg = SnapPointRegistry()
        a = reg.add_point(100, user_data={"k": 1})
        b = reg.add_point(300)
        self.assertNotEqual(a, b)
        reg.remove(a)
        reg.remove(a)           # second removal is a no-op
        reg.remove(12345)       # unknown token too
        snap = reg.snapshot(600)
        self.assertEqual([p.position for p in snap], [300])
        c = reg.add_point(500)
        self.assertNotIn(c, (a, b))

    def test_snapshot_is_unaffected_by_later_removal(self):
        reg = SnapPointRegistry()
        a = reg.add_point(100)
        reg.add_point(300)
        snap = reg.snapshot(600)
        reg.remove(a)
        self.assertEqual([p.position for p in snap], [100, 300])
        self.assertIsInstance(snap, tuple)
        self.assertEqual(len(reg.snapshot(600)), 1)

    def test_registries_do_not_share_ids(self):
        self.assertEqual(SnapPointRegistry().add_point(1), SnapPointRegistry().add_point(1))

    def test_stop_empties_snapshots(self):
        reg = SnapPointRegistry()
        reg.add_point(100)
        reg.stop()
        self.assertEqual(reg.snapshot(600), ())
        reg.start()
        self.assertEqual(len(reg.snapshot(600)), 1)

    def test_clamp_to_limit(self):
        reg = SnapPointRegistry()
        reg.add_point(-20)
        reg.add_point(5000)
        self.assertEqual([p.position for p in reg.snapshot(600, limit=2000)], [0, 2000])


class TestElementPoints(unittest.TestCase):
    def setUp(self):
        self.geo = FakeGeometry({"hero": Rect(top=800, height=300, width=500)})
        self.reg = SnapPointRegistry(self.geo)

    def test_one_point_per_alignment(self):
        self.reg.add_element("hero", align=["start", "center", "end"], threshold=90)
        snap = self.reg.snapshot(600)
        self.assertEqual([p.position for p in snap], [800, 650, 500])
        self.assertTrue(all(p.source == Source.ELEMENT for p in snap))
        self.assertTrue(all(p.threshold_override == 90 for p in snap))
        self.assertEqual([p.align for p in snap], [Align.START, Align.CENTER, Align.END])
        self.assertEqual(snap[0].user_data, "hero")

    def test_unknown_alignment_keeps_the_others(self):
        with self.assertLogs("scrollsnap.registry", level="WARNING"):
            self.reg.add_element("hero", align=["start", "sideways"])
        self.assertEqual([p.position for p in self.reg.snapshot(600)], [800])

    def test_positions_follow_geometry(self):
        self.reg.add_element("hero")
        self.geo.push("hero", Rect(top=950, height=300))
        self.assertEqual(self.reg.snapshot(600)[0].position, 950)

    def test_unavailable_rect_keeps_last_known(self):
        self.reg.add_element("hero")
        self.geo.push("hero", None)
        self.assertEqual(self.reg.snapshot(600)[0].position, 800)

    def test_element_without_rect_contributes_nothing(self):
        self.reg.add_element("ghost")
        self.assertEqual(self.reg.snapshot(600), ())
        self.geo.push("ghost", Rect(top=10, height=10))
        self.assertEqual(len(self.reg.snapshot(600)), 1)

    def test_fractional_positions_round_up(self):
        self.geo.push("hero", Rect(top=800.2, height=300))
        self.reg.add_element("hero")
        self.assertEqual(self.reg.snapshot(600)[0].position, 801)

    def test_element_height_threshold_fallback(self):
        self.reg.add_element("hero")
        self.assertIsNone(self.reg.snapshot(600)[0].threshold_override)
        self.assertEqual(self.reg.snapshot(600, element_height_threshold=True)[0].threshold_override, 300)

    def test_observer_options_are_forwarded(self):
        self.reg.add_element("hero", ignore_sticky=False, ignore_transform=True)
        self.assertEqual(self.geo.options[-1], {"ignore_sticky": False, "ignore_transform": True})

    def test_remove_releases_observer(self):
        token = self.reg.add_element("hero")
        self.assertEqual(self.geo.active, 1)
        self.reg.remove(token)
        self.assertEqual(self.geo.active, 0)

    def test_destroy_releases_everything_once(self):
        self.reg.add_element("hero")
        self.reg.add_element("hero", align="end")
        self.reg.add_point(10)
        self.reg.destroy()
        self.reg.destroy()
        self.assertEqual(self.geo.subscribed, 2)
        self.assertEqual(self.geo.unsubscribed, 2)
        self.assertEqual(len(self.reg), 0)

    def test_destroyed_registry_refuses_new_points(self):
        self.reg.destroy()
        with self.assertRaises(RuntimeError):
            self.reg.add_element("hero")
        with self.assertRaises(RuntimeError):
            self.reg.add_point(10)
        self.assertEqual(self.geo.subscribed, 0)

    def test_add_element_needs_geometry(self):
        with self.assertRaises(ValueError):
            SnapPointRegistry().add_element("hero")


if __name__ == "__main__":
    unittest.main()
