"""
Tests for the caption overlay renderer.

Tests cover:
- Caption layout (font size, stroke width, anchors)
- MemeParams normalization
- Rendering leaves the base untouched
- Empty captions draw nothing
- Color changes only affect caption pixels
- Outline reach of the stroke pass
- Drawing surface failures
"""

import unittest
from unittest.mock import Mock, patch

import numpy as np

from OE_Libs.errors import ContextUnavailable
from OE_Libs.ImageEditingLib.image_models import RasterImage
from OE_Libs.ImageEditingLib.overlay_renderer import (
    MemeParams,
    _draw_caption,
    caption_layout,
    render_overlay,
)


def changed_mask(a: RasterImage, b: RasterImage) -> np.ndarray:
    """Boolean (height, width) mask of pixels that differ."""
    return np.any(np.asarray(a.image) != np.asarray(b.image), axis=-1)


class TestCaptionLayout(unittest.TestCase):
    """Test caption_layout."""

    def test_font_size_is_tenth_of_width(self):
        """Should size the font at a tenth of the width, floored."""
        self.assertEqual(caption_layout(200, 100).font_size, 20)
        self.assertEqual(caption_layout(209, 100).font_size, 20)

    def test_font_size_never_zero(self):
        """Should keep the font at least 1 pixel on tiny images."""
        self.assertEqual(caption_layout(5, 5).font_size, 1)

    def test_stroke_width(self):
        """Should make the stroke a fifteenth of the font size."""
        self.assertAlmostEqual(caption_layout(300, 100).stroke_width, 2.0)

    def test_anchors(self):
        """Should center anchors horizontally and inset them vertically."""
        layout = caption_layout(200, 120, inset=10)

        self.assertEqual(layout.top_anchor, (100, 10))
        self.assertEqual(layout.bottom_anchor, (100, 110))


class TestMemeParams(unittest.TestCase):
    """Test MemeParams."""

    def test_defaults(self):
        """Should default to empty captions, white fill and black stroke."""
        params = MemeParams()

        self.assertEqual(params.top_text, "")
        self.assertEqual(params.bottom_text, "")
        self.assertEqual(params.fill_color, (255, 255, 255))
        self.assertEqual(params.stroke_color, (0, 0, 0))
        self.assertFalse(params.has_text)

    def test_colors_normalized(self):
        """Should normalize hex and tuple colors to RGB tuples."""
        params = MemeParams(fill_color="#ff0000", stroke_color=(0, 0, 255))

        self.assertEqual(params.fill_color, (255, 0, 0))
        self.assertEqual(params.stroke_color, (0, 0, 255))

    def test_invalid_color(self):
        """Should reject a color that is not hex."""
        with self.assertRaises(ValueError):
            MemeParams(fill_color="#nothex")

    def test_updated_ignores_none(self):
        """Should keep fields whose update value is None."""
        params = MemeParams(top_text="a", bottom_text="b")

        updated = params.updated(top_text=None, bottom_text="c")

        self.assertEqual(updated.top_text, "a")
        self.assertEqual(updated.bottom_text, "c")


class TestDrawCaption(unittest.TestCase):
    """Test the stroke and fill passes of a single caption."""

    def test_stroke_reaches_half_the_line_width(self):
        """Should stroke outward by half the line width, keeping fractions."""
        draw = Mock()

        _draw_caption(draw, (50, 10), "HI", "ma", Mock(), 1.0, (255, 255, 255), (0, 0, 0))

        stroke_call, fill_call = draw.text.call_args_list
        self.assertEqual(stroke_call.kwargs["stroke_width"], 0.5)
        self.assertEqual(stroke_call.kwargs["stroke_fill"], (0, 0, 0, 255))
        self.assertNotIn("stroke_width", fill_call.kwargs)
        self.assertEqual(fill_call.kwargs["fill"], (255, 255, 255, 255))

    def test_thin_stroke_is_not_rounded_up(self):
        """Should pass a sub-pixel reach through unchanged for small fonts."""
        draw = Mock()
        layout = caption_layout(140, 100)

        _draw_caption(
            draw, layout.top_anchor, "HI", "ma", Mock(), layout.stroke_width,
            (255, 255, 255), (0, 0, 0),
        )

        reach = draw.text.call_args_list[0].kwargs["stroke_width"]
        self.assertAlmostEqual(reach, 14 / 15 / 2)
        self.assertLess(reach, 1)


class TestRenderOverlay(unittest.TestCase):
    """Test render_overlay."""

    def setUp(self):
        self.base = RasterImage.new(200, 120, (0, 0, 255, 255))
        self.snapshot = self.base.copy()

    def test_no_text_returns_equal_copy(self):
        """Should return an identical copy when there is no caption."""
        result = render_overlay(self.base, MemeParams())

        self.assertIsNot(result, self.base)
        self.assertTrue(result.same_pixels(self.base))

    def test_base_is_not_modified(self):
        """Should never draw on the base image."""
        render_overlay(self.base, MemeParams(top_text="top", bottom_text="bottom"))

        self.assertTrue(self.base.same_pixels(self.snapshot))

    def test_output_size_matches_base(self):
        """Should return an image the size of the base."""
        result = render_overlay(self.base, MemeParams(top_text="hello"))

        self.assertEqual(result.size, self.base.size)

    def test_bottom_only(self):
        """Should draw only in the bottom half for a bottom caption."""
        result = render_overlay(self.base, MemeParams(top_text="", bottom_text="bottom"))
        mask = changed_mask(result, self.base)

        self.assertFalse(mask[:60].any(), "top half should be untouched")
        self.assertTrue(mask[60:].any(), "bottom caption should be drawn")

    def test_top_only(self):
        """Should draw only in the top half for a top caption."""
        result = render_overlay(self.base, MemeParams(top_text="top"))
        mask = changed_mask(result, self.base)

        self.assertTrue(mask[:60].any())
        self.assertFalse(mask[60:].any())

    def test_text_is_upper_cased(self):
        """Should render lower-case text as upper case."""
        lower = render_overlay(self.base, MemeParams(top_text="hello"))
        upper = render_overlay(self.base, MemeParams(top_text="HELLO"))

        self.assertTrue(lower.same_pixels(upper))

    def test_fill_change_only_touches_caption(self):
        """Should limit a fill color change to caption pixels."""
        red = render_overlay(self.base, MemeParams(bottom_text="caption", fill_color="#ff0000"))
        green = render_overlay(self.base, MemeParams(bottom_text="caption", fill_color="#00ff00"))

        caption = changed_mask(red, self.base)
        between = changed_mask(red, green)

        self.assertTrue(between.any())
        self.assertFalse((between & ~caption).any())

    def test_stroke_drawn_under_fill(self):
        """Should show both solid fill and solid stroke pixels."""
        base = RasterImage.new(600, 200, (0, 0, 255, 255))
        params = MemeParams(top_text="HELLO", fill_color="#ffffff", stroke_color="#000000")
        result = np.asarray(render_overlay(base, params).image)
        colors = {tuple(p) for p in result.reshape(-1, 4)}

        self.assertIn((255, 255, 255, 255), colors)
        self.assertIn((0, 0, 0, 255), colors)

    def test_small_caption_renders(self):
        """Should render a caption whose stroke reach is below one pixel."""
        base = RasterImage.new(140, 60, (0, 0, 255, 255))

        result = render_overlay(base, MemeParams(top_text="hi"))

        self.assertTrue(changed_mask(result, base).any())

    def test_drawing_surface_failure(self):
        """Should raise ContextUnavailable when no drawing surface is available."""
        with patch(
            "OE_Libs.ImageEditingLib.overlay_renderer.ImageDraw.Draw",
            side_effect=ValueError("no surface"),
        ):
            with self.assertRaises(ContextUnavailable):
                render_overlay(self.base, MemeParams(top_text="x"))
