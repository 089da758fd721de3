"""
Tests for services.renderer - segment layout and paint pass.

Tests cover:
- Orientation selection and bar size / bounds adjustment
- Segment rectangles for all four orientation x direction combinations
- Lit/unlit state and zone colors per segment
- Fill style selection (gradient, solid, unlit) and gradient geometry
- Paint op sequence on a RecordingSurface
- Idempotence and tiny viewports
"""

import math
import unittest
from dataclasses import replace

from stackedled.core.models import (
    BLACK,
    GRAY,
    Color,
    FillStyle,
    MeterConfig,
    Orientation,
    Rect,
)
from stackedled.core.surface import RecordingSurface
from stackedled.services.mapper import SegmentMapper
from stackedled.services.renderer import SegmentRenderer


def _plan(viewport=Rect(0, 0, 40, 100), **options):
    cfg = MeterConfig(**options)
    return SegmentRenderer.plan(cfg, SegmentMapper.derive(cfg), viewport)


class TestLayout(unittest.TestCase):
    """Test orientation, bar size and bounds."""

    def test_vertical_when_tall(self):
        plan = _plan(Rect(0, 0, 40, 100))
        self.assertEqual(plan.orientation, Orientation.VERTICAL)
        self.assertEqual(plan.bar_size, 10)

    def test_square_is_vertical(self):
        self.assertEqual(_plan(Rect(0, 0, 50, 50)).orientation, Orientation.VERTICAL)

    def test_horizontal_when_wide(self):
        plan = _plan(Rect(0, 0, 300, 30))
        self.assertEqual(plan.orientation, Orientation.HORIZONTAL)
        self.assertEqual(plan.bar_size, 30)

    def test_bounds_shrunk_to_multiple(self):
        plan = _plan(Rect(0, 0, 40, 107))
        self.assertEqual(plan.bar_size, 10)
        self.assertEqual(plan.bounds, Rect(0, 0, 40, 100))

        plan = _plan(Rect(0, 0, 215, 30), num_bars=20)
        self.assertEqual(plan.bar_size, 10)
        self.assertEqual(plan.bounds, Rect(0, 0, 200, 30))

    def test_segment_cross_size(self):
        plan = _plan(Rect(0, 0, 40, 100))
        for seg in plan.segments:
            self.assertEqual(seg.rect.x, 1)
            self.assertEqual(seg.rect.width, 38)
            self.assertEqual(seg.rect.height, 10)

    def test_fill_rect_inset_by_one(self):
        seg = _plan(Rect(0, 0, 40, 100)).segments[0]
        self.assertEqual(seg.fill_rect, Rect(2, 91, 36, 8))

    def test_viewport_origin_respected(self):
        plan = _plan(Rect(5, 7, 40, 100))
        self.assertEqual(plan.bounds, Rect(5, 7, 40, 100))
        self.assertEqual(plan.segments[0].rect, Rect(6, 97, 38, 10))

    def test_too_small_viewport_has_no_segments(self):
        plan = _plan(Rect(0, 0, 4, 5))
        self.assertEqual(plan.bar_size, 0)
        self.assertEqual(plan.segments, ())


class TestDirection(unittest.TestCase):
    """All four orientation x direction combinations."""

    def test_vertical_normal_grows_upward(self):
        plan = _plan(Rect(0, 0, 40, 100))
        self.assertEqual(plan.segments[0].rect.y, 90)   # bottom-most
        self.assertEqual(plan.segments[9].rect.y, 0)    # top-most

    def test_vertical_reversed_grows_downward(self):
        plan = _plan(Rect(0, 0, 40, 100), reverse_direction=True)
        self.assertEqual(plan.segments[0].rect.y, 0)
        self.assertEqual(plan.segments[9].rect.y, 90)

    def test_horizontal_normal_grows_right(self):
        plan = _plan(Rect(0, 0, 100, 20))
        self.assertEqual(plan.segments[0].rect, Rect(0, 1, 10, 18))
        self.assertEqual(plan.segments[9].rect.x, 90)

    def test_horizontal_reversed_grows_left(self):
        plan = _plan(Rect(0, 0, 100, 20), reverse_direction=True)
        self.assertEqual(plan.segments[0].rect.x, 90)
        self.assertEqual(plan.segments[9].rect.x, 0)

    def test_segments_tile_bounds(self):
        for viewport in (Rect(0, 0, 40, 100), Rect(0, 0, 100, 20)):
            for reverse in (False, True):
                plan = _plan(viewport, reverse_direction=reverse)
                key = 'y' if plan.orientation == Orientation.VERTICAL else 'x'
                starts = sorted(getattr(s.rect, key) for s in plan.segments)
                self.assertEqual(starts, list(range(0, 100, 10)))


class TestSegmentState(unittest.TestCase):
    """Lit state, zone colors and fill styles."""

    def test_lit_range(self):
        plan = _plan(value=0.65)
        self.assertEqual(plan.lit_indices(), (0, 1, 2, 3, 4, 5))

    def test_nothing_lit_below_min(self):
        self.assertEqual(_plan(value=-1.0).lit_indices(), ())

    def test_all_lit_above_max(self):
        self.assertEqual(_plan(value=3.0).lit_indices(), tuple(range(10)))

    def test_peak_segment_lit(self):
        cfg = MeterConfig(hold_peak=True, value=0.95)
        derived = SegmentMapper.derive(cfg)
        new = replace(cfg, value=0.25)
        derived, _ = SegmentMapper.apply_config(new, cfg, derived)
        plan = SegmentRenderer.plan(new, derived, Rect(0, 0, 40, 100))
        self.assertEqual(plan.lit_indices(), (0, 1, 9))

    def test_zone_colors(self):
        cfg = MeterConfig()
        plan = _plan()
        self.assertEqual(plan.segments[5].color, cfg.normal_color)
        self.assertEqual(plan.segments[6].color, cfg.warning_color)
        self.assertEqual(plan.segments[7].color, cfg.warning_color)
        self.assertEqual(plan.segments[8].color, cfg.danger_color)
        self.assertEqual(plan.segments[9].color, cfg.danger_color)

    def test_disabled_warning_zone(self):
        cfg = MeterConfig()
        plan = _plan(warn_threshold=0.0)
        self.assertEqual(plan.segments[7].color, cfg.normal_color)
        self.assertEqual(plan.segments[8].color, cfg.danger_color)

    def test_danger_below_warning_wins(self):
        cfg = MeterConfig()
        plan = _plan(warn_threshold=0.6, danger_threshold=0.3)
        self.assertEqual(plan.segments[4].color, cfg.danger_color)

    def test_styles(self):
        plan = _plan(value=0.5)
        self.assertEqual(plan.segments[0].style, FillStyle.GRADIENT)
        self.assertEqual(plan.segments[7].style, FillStyle.UNLIT)
        plan = _plan(value=0.5, lit_effect=False)
        self.assertEqual(plan.segments[0].style, FillStyle.SOLID)
        self.assertIsNone(plan.segments[0].gradient)

    def test_gradient_geometry(self):
        seg = _plan(value=0.5).segments[0]
        grad = seg.gradient
        self.assertEqual(grad.center, (20.0, 95.0))
        self.assertAlmostEqual(grad.end_radius, math.hypot(36, 8))
        self.assertEqual(grad.start_radius, 0.0)
        self.assertEqual(grad.stops[0], (0.0, seg.color))
        self.assertEqual(grad.stops[1], (0.5, seg.color.darkened()))


class TestPaint(unittest.TestCase):
    """Paint op sequence."""

    def _ops(self, **options):
        surface = RecordingSurface()
        SegmentRenderer.paint(_plan(**options), surface)
        return surface.ops

    def test_background_first_border_last(self):
        ops = self._ops()
        self.assertEqual(ops[0], ('fill_rect', Rect(0, 0, 40, 100), BLACK))
        self.assertEqual(ops[-1], ('stroke_rect', Rect(1, 1, 38, 98), GRAY, 2.0))

    def test_each_segment_stroked_and_clipped(self):
        ops = self._ops()
        strokes = [op for op in ops if op[0] == 'stroke_rect' and op[3] == 1.0]
        self.assertEqual(len(strokes), 10)
        self.assertTrue(all(op[2] == BLACK for op in strokes))
        self.assertEqual(sum(1 for op in ops if op[0] == 'save'), 10)
        self.assertEqual(sum(1 for op in ops if op[0] == 'restore'), 10)
        self.assertEqual(sum(1 for op in ops if op[0] == 'clip_rect'), 10)

    def test_unlit_segment_fill(self):
        cfg = MeterConfig()
        ops = self._ops(value=0.0)
        # stroke, save, clip, background, tint, restore for segment 0
        seg_ops = ops[1:7]
        self.assertEqual(seg_ops[0][0], 'stroke_rect')
        self.assertEqual(seg_ops[1], ('save',))
        self.assertEqual(seg_ops[2][0], 'clip_rect')
        self.assertEqual(seg_ops[3][2], cfg.background_color)
        tint = seg_ops[4][2]
        self.assertEqual((tint.r, tint.g, tint.b), (0.0, 1.0, 0.0))
        self.assertAlmostEqual(tint.a, 0.2)
        self.assertEqual(seg_ops[5], ('restore',))

    def test_gradient_and_solid_fills(self):
        ops = self._ops(value=1.0)
        self.assertEqual(sum(1 for op in ops if op[0] == 'fill_radial_gradient'), 10)
        ops = self._ops(value=1.0, lit_effect=False)
        self.assertEqual(sum(1 for op in ops if op[0] == 'fill_radial_gradient'), 0)
        solid = [op for op in ops if op[0] == 'fill_rect'][1:]
        self.assertEqual(len(solid), 10)

    def test_custom_colors(self):
        red = Color(1.0, 0.0, 0.0)
        ops = self._ops(outer_border_color=red, inner_border_color=red)
        self.assertEqual(ops[-1][2], red)
        self.assertEqual(ops[1][2], red)

    def test_idempotent(self):
        self.assertEqual(_plan(value=0.42), _plan(value=0.42))
        self.assertEqual(self._ops(value=0.42), self._ops(value=0.42))

    def test_tiny_viewport_draws_border_only(self):
        surface = RecordingSurface()
        SegmentRenderer.paint(_plan(Rect(0, 0, 4, 5)), surface)
        self.assertEqual([op[0] for op in surface.ops], ['fill_rect', 'stroke_rect'])


if __name__ == '__main__':
    unittest.main()
