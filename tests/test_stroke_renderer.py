"""
Tests for the stroke renderer.

Tests cover:
- Resolution-scaled stroke width
- Pointer state machine (down / move / up / leave)
- Disconnected sub-paths between gestures
- Paint and erase compositing
- Mask-changed notifications
- Layout-not-ready handling
"""

import unittest

import numpy as np

from IM_Libs.MaskEditingLib.mask_codec import decode_data_url
from IM_Libs.MaskEditingLib.mask_models import BrushMode, BrushState, DisplayRect, SourceImage
from IM_Libs.MaskEditingLib.stroke_renderer import (
    StrokeRenderer,
    compute_stroke_width,
    resolution_scale,
)


def alpha_at(renderer, x, y):
    return renderer.raster.getpixel((x, y))[3]


class TestStrokeWidth(unittest.TestCase):
    """Test resolution-independent brush sizing."""

    def test_large_image_scales_brush_up(self):
        """Diameter 20 on 1600x1200 should render 35px wide."""
        source = SourceImage(1600, 1200)

        self.assertAlmostEqual(resolution_scale(source), 1.75)
        self.assertAlmostEqual(compute_stroke_width(20, source), 35.0)

    def test_small_image_never_shrinks_brush(self):
        """Images below the reference size keep the nominal diameter."""
        source = SourceImage(200, 100)

        self.assertLess(resolution_scale(source), 1.0)
        self.assertEqual(compute_stroke_width(20, source), 20)

    def test_custom_reference_size(self):
        """The reference size is configurable."""
        source = SourceImage(1600, 1200)

        self.assertAlmostEqual(compute_stroke_width(10, source, reference_size=400), 35.0)

    def test_renderer_uses_brush_diameter(self):
        """Renderer width follows the shared brush state."""
        brush = BrushState(diameter=40)
        renderer = StrokeRenderer(SourceImage(1600, 1200), brush)

        self.assertAlmostEqual(renderer.stroke_width(), 70.0)
        brush.diameter = 20
        self.assertAlmostEqual(renderer.stroke_width(), 35.0)


class TestStrokeStateMachine(unittest.TestCase):
    """Test pointer event handling."""

    def setUp(self):
        """Create a renderer on a 1600x1200 image shown at 400x300."""
        self.source = SourceImage(1600, 1200)
        self.rect = DisplayRect(0, 0, 400, 300)
        self.brush = BrushState(mode="paint", diameter=20)
        self.published = []
        self.renderer = StrokeRenderer(
            self.source, self.brush, on_mask_change=self.published.append
        )

    def test_raster_matches_source_and_starts_transparent(self):
        """The paint layer is native resolution and empty."""
        self.assertEqual(self.renderer.raster.size, (1600, 1200))
        self.assertEqual(self.renderer.raster.mode, "RGBA")
        self.assertIsNone(self.renderer.raster.getbbox())
        self.assertFalse(self.renderer.is_drawing)

    def test_horizontal_drag_paints_in_image_space(self):
        """Drag (50,50)->(150,50) paints (200,200)->(600,200) at width 35."""
        self.assertTrue(self.renderer.pointer_down(50, 50, self.rect))
        self.assertTrue(self.renderer.pointer_move(150, 50, self.rect))
        self.assertTrue(self.renderer.pointer_up())

        # Along the segment and at both ends
        for x in (200, 300, 400, 500, 600):
            self.assertGreater(alpha_at(self.renderer, x, 200), 0)
        self.assertEqual(self.renderer.raster.getpixel((400, 200))[:3], (255, 255, 255))

        # Within half the width above and below
        self.assertGreater(alpha_at(self.renderer, 400, 190), 0)
        self.assertGreater(alpha_at(self.renderer, 400, 210), 0)

        # Outside the stroke
        self.assertEqual(alpha_at(self.renderer, 400, 230), 0)
        self.assertEqual(alpha_at(self.renderer, 400, 170), 0)
        self.assertEqual(alpha_at(self.renderer, 170, 200), 0)
        self.assertEqual(alpha_at(self.renderer, 630, 200), 0)

        left, top, right, bottom = self.renderer.raster.getbbox()
        self.assertGreaterEqual(left, 180)
        self.assertLessEqual(right, 620)
        self.assertGreaterEqual(top, 180)
        self.assertLessEqual(bottom, 220)

    def test_click_without_move_paints_a_dot(self):
        """pointer_down stamps the brush at the down point."""
        self.renderer.pointer_down(100, 100, self.rect)
        self.renderer.pointer_up()

        self.assertGreater(alpha_at(self.renderer, 400, 400), 0)
        self.assertEqual(alpha_at(self.renderer, 440, 400), 0)

    def test_gestures_are_not_connected(self):
        """A new gesture never draws a line from the previous gesture's end."""
        self.renderer.pointer_down(20, 20, self.rect)
        self.renderer.pointer_move(30, 20, self.rect)
        self.renderer.pointer_up()

        self.renderer.pointer_down(20, 100, self.rect)
        self.renderer.pointer_move(30, 100, self.rect)
        self.renderer.pointer_up()

        self.assertGreater(alpha_at(self.renderer, 100, 80), 0)
        self.assertGreater(alpha_at(self.renderer, 100, 400), 0)
        # Halfway between the two strokes
        self.assertEqual(alpha_at(self.renderer, 100, 240), 0)
        self.assertEqual(alpha_at(self.renderer, 120, 240), 0)

    def test_consecutive_moves_chain_segments(self):
        """Each move draws from the previous point."""
        self.renderer.pointer_down(50, 50, self.rect)
        self.renderer.pointer_move(50, 150, self.rect)
        self.renderer.pointer_move(150, 150, self.rect)
        self.renderer.pointer_up()

        # Vertical leg then horizontal leg
        self.assertGreater(alpha_at(self.renderer, 200, 400), 0)
        self.assertGreater(alpha_at(self.renderer, 400, 600), 0)
        # No diagonal shortcut from start to end
        self.assertEqual(alpha_at(self.renderer, 400, 400), 0)

    def test_stroke_session_records_points(self):
        """Points are kept for the duration of a gesture only."""
        self.renderer.pointer_down(50, 50, self.rect)
        self.renderer.pointer_move(60, 50, self.rect)

        self.assertTrue(self.renderer.is_drawing)
        self.assertEqual(len(self.renderer.stroke.points), 2)
        self.assertEqual(self.renderer.stroke.last_point, (240.0, 200.0))

        self.renderer.pointer_up()
        self.assertIsNone(self.renderer.stroke)

    def test_move_without_down_is_ignored(self):
        """Moves while idle draw nothing."""
        self.assertFalse(self.renderer.pointer_move(100, 100, self.rect))
        self.assertIsNone(self.renderer.raster.getbbox())

    def test_leave_ends_gesture(self):
        """After leaving the canvas, moves are ignored even if still pressed."""
        self.renderer.pointer_down(50, 50, self.rect)
        self.assertTrue(self.renderer.pointer_leave())
        self.assertFalse(self.renderer.is_drawing)

        self.assertFalse(self.renderer.pointer_move(150, 150, self.rect))
        self.assertEqual(alpha_at(self.renderer, 600, 600), 0)

    def test_up_publishes_raster(self):
        """Every finished gesture publishes the raster as a PNG data URL."""
        self.renderer.pointer_down(50, 50, self.rect)
        self.renderer.pointer_move(150, 50, self.rect)
        self.renderer.pointer_up()

        self.assertEqual(len(self.published), 1)
        self.assertTrue(self.published[0].startswith("data:image/png;base64,"))

        decoded = decode_data_url(self.published[0])
        self.assertEqual(decoded.size, (1600, 1200))
        np.testing.assert_array_equal(np.asarray(decoded), np.asarray(self.renderer.raster))

    def test_publishes_even_without_changes(self):
        """A gesture that lands entirely off the image still publishes."""
        self.renderer.pointer_down(-500, -500, self.rect)
        self.renderer.pointer_up()

        self.assertEqual(len(self.published), 1)
        self.assertIsNone(self.renderer.raster.getbbox())

    def test_idle_up_and_leave_do_not_publish(self):
        """Ending a gesture that never started is a no-op."""
        self.assertFalse(self.renderer.pointer_up())
        self.assertFalse(self.renderer.pointer_leave())
        self.assertEqual(self.published, [])

    def test_unlaid_out_rect_is_a_no_op(self):
        """Pointer down against a zero rect starts nothing."""
        empty = DisplayRect(0, 0, 0, 0)

        self.assertFalse(self.renderer.pointer_down(50, 50, empty))
        self.assertFalse(self.renderer.is_drawing)
        self.assertIsNone(self.renderer.raster.getbbox())

    def test_zero_rect_mid_stroke_skips_point(self):
        """A move while layout is missing is dropped without ending the gesture."""
        self.renderer.pointer_down(50, 50, self.rect)

        self.assertFalse(self.renderer.pointer_move(150, 50, DisplayRect(0, 0, 0, 0)))
        self.assertTrue(self.renderer.is_drawing)
        self.assertEqual(len(self.renderer.stroke.points), 1)

    def test_mode_is_fixed_for_a_gesture(self):
        """Switching tools mid-gesture applies to the next gesture."""
        self.renderer.pointer_down(50, 50, self.rect)
        self.brush.mode = BrushMode.ERASE
        self.renderer.pointer_move(150, 50, self.rect)
        self.renderer.pointer_up()

        self.assertGreater(alpha_at(self.renderer, 400, 200), 0)

    def test_clear_resets_raster(self):
        """clear() empties the paint layer and drops any gesture."""
        self.renderer.pointer_down(50, 50, self.rect)
        self.renderer.pointer_move(150, 50, self.rect)
        self.renderer.clear()

        self.assertFalse(self.renderer.is_drawing)
        self.assertIsNone(self.renderer.raster.getbbox())

    def test_dirty_box_covers_painted_pixels(self):
        """take_dirty_box() reports the repainted area once."""
        self.assertIsNone(self.renderer.take_dirty_box())

        self.renderer.pointer_down(50, 50, self.rect)
        self.renderer.pointer_move(150, 50, self.rect)
        box = self.renderer.take_dirty_box()

        painted = self.renderer.raster.getbbox()
        self.assertIsNotNone(box)
        self.assertLessEqual(box[0], painted[0])
        self.assertLessEqual(box[1], painted[1])
        self.assertGreaterEqual(box[2], painted[2])
        self.assertGreaterEqual(box[3], painted[3])
        self.assertLess(box[2] - box[0], self.source.width)
        self.assertIsNone(self.renderer.take_dirty_box())

    def test_clear_marks_whole_raster_dirty(self):
        self.renderer.clear()

        self.assertEqual(self.renderer.take_dirty_box(), (0, 0, 1600, 1200))

    def test_rejects_invalid_arguments(self):
        with self.assertRaises(TypeError):
            StrokeRenderer((100, 100))
        with self.assertRaises(ValueError):
            StrokeRenderer(self.source, reference_size=0)


class TestCompositing(unittest.TestCase):
    """Test paint and erase compositing."""

    def setUp(self):
        self.source = SourceImage(1600, 1200)
        self.rect = DisplayRect(0, 0, 400, 300)
        self.brush = BrushState(diameter=20)
        self.renderer = StrokeRenderer(self.source, self.brush)

    def drag(self, points):
        self.renderer.pointer_down(points[0][0], points[0][1], self.rect)
        for x, y in points[1:]:
            self.renderer.pointer_move(x, y, self.rect)
        self.renderer.pointer_up()

    def test_paint_uses_fill_color(self):
        """A single paint layer carries the fill alpha."""
        self.drag([(50, 50), (150, 50)])

        self.assertEqual(self.renderer.raster.getpixel((400, 200)), (255, 255, 255, 128))

    def test_overlapping_paint_accumulates(self):
        """Painting over paint increases coverage (source-over)."""
        self.drag([(50, 50), (150, 50)])
        self.drag([(50, 50), (150, 50)])

        self.assertGreater(alpha_at(self.renderer, 400, 200), 128)

    def test_erase_identical_path_clears_everything(self):
        """Painting then erasing the same path leaves alpha 0 everywhere."""
        path = [(40, 40), (90, 60), (150, 50), (200, 180), (120, 250)]

        self.drag(path)
        self.assertIsNotNone(self.renderer.raster.getbbox())

        self.brush.mode = BrushMode.ERASE
        self.drag(path)

        alpha = np.asarray(self.renderer.raster)[:, :, 3]
        self.assertEqual(int(alpha.max()), 0)

    def test_erase_only_touches_its_own_path(self):
        """Erasing part of a stroke leaves the rest painted."""
        self.drag([(50, 50), (350, 50)])

        self.brush.mode = BrushMode.ERASE
        self.drag([(200, 20), (200, 80)])

        self.assertEqual(alpha_at(self.renderer, 800, 200), 0)
        self.assertEqual(self.renderer.raster.getpixel((800, 200)), (0, 0, 0, 0))
        self.assertGreater(alpha_at(self.renderer, 400, 200), 0)
        self.assertGreater(alpha_at(self.renderer, 1200, 200), 0)

    def test_erase_on_empty_raster_stays_empty(self):
        self.brush.mode = BrushMode.ERASE
        self.drag([(50, 50), (150, 150)])

        self.assertIsNone(self.renderer.raster.getbbox())

    def test_strokes_clip_at_raster_edge(self):
        """Strokes running off the image are clipped, not wrapped."""
        self.drag([(390, 150), (450, 150)])

        self.assertGreater(alpha_at(self.renderer, 1599, 600), 0)
        self.assertEqual(alpha_at(self.renderer, 0, 600), 0)


if __name__ == "__main__":
    unittest.main()
