"""
Caption Overlay Renderer.

Draws meme-style top and bottom captions over a copy of a base image. The
base is never modified, so the overlay can be re-rendered on every parameter
change from whatever image is current at that moment.

Example:
    >>> params = MemeParams(top_text="when the build", bottom_text="passes")
    >>> frame = render_overlay(session_image, params)
"""

from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Optional, Tuple
import logging

from PIL import ImageDraw, ImageFont

from OE_Libs.constants import (
    CAPTION_FONT_CANDIDATES,
    CAPTION_FONT_DIVISOR,
    CAPTION_INSET,
    CAPTION_STROKE_DIVISOR,
    DEFAULT_FILL_COLOR,
    DEFAULT_STROKE_COLOR,
)
from OE_Libs.errors import ContextUnavailable
from OE_Libs.ImageEditingLib.image_models import (
    ColorLike,
    RasterImage,
    RgbColor,
    parse_color,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemeParams:
    """Caption overlay parameters.

    Attributes:
        top_text: Caption anchored at the top edge ('' draws nothing)
        bottom_text: Caption anchored at the bottom edge ('' draws nothing)
        fill_color: Glyph fill color
        stroke_color: Glyph outline color
    """
    top_text: str = ""
    bottom_text: str = ""
    fill_color: ColorLike = DEFAULT_FILL_COLOR
    stroke_color: ColorLike = DEFAULT_STROKE_COLOR

    def __post_init__(self):
        """Normalize colors to RGB tuples."""
        object.__setattr__(self, "top_text", str(self.top_text or ""))
        object.__setattr__(self, "bottom_text", str(self.bottom_text or ""))
        object.__setattr__(self, "fill_color", parse_color(self.fill_color))
        object.__setattr__(self, "stroke_color", parse_color(self.stroke_color))

    @property
    def has_text(self) -> bool:
        return bool(self.top_text or self.bottom_text)

    def updated(self, **changes: Any) -> "MemeParams":
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@dataclass(frozen=True)
class CaptionLayout:
    """Where and how large captions are drawn on a given image size."""
    font_size: int
    stroke_width: float
    top_anchor: Tuple[float, float]
    bottom_anchor: Tuple[float, float]


def caption_layout(width: int, height: int, inset: int = CAPTION_INSET) -> CaptionLayout:
    """Compute caption font size, stroke width and anchor points."""
    font_size = max(1, width // CAPTION_FONT_DIVISOR)
    return CaptionLayout(
        font_size=font_size,
        stroke_width=font_size / CAPTION_STROKE_DIVISOR,
        top_anchor=(width / 2, inset),
        bottom_anchor=(width / 2, height - inset),
    )


@lru_cache(maxsize=32)
def load_caption_font(size: int, font_path: Optional[str] = None) -> Any:
    """
    Load the caption font at a pixel size.

    Tries the configured path, then Impact and common bold sans fonts, then
    Pillow's built-in scalable font.
    """
    candidates = ((font_path,) if font_path else ()) + CAPTION_FONT_CANDIDATES
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue

    logger.warning(f"No caption font found, using Pillow default at size {size}")
    return ImageFont.load_default(size=size)


def _stroke_reach(stroke_width: float) -> float:
    # Pillow strokes outward by this distance; a canvas line width straddles the outline
    return stroke_width / 2


def _draw_caption(
    draw: Any,
    anchor_point: Tuple[float, float],
    text: str,
    anchor: str,
    font: Any,
    stroke_width: float,
    fill: RgbColor,
    stroke: RgbColor,
) -> None:
    stroke_ink = stroke + (255,)
    draw.text(
        anchor_point,
        text,
        font=font,
        anchor=anchor,
        fill=stroke_ink,
        stroke_width=_stroke_reach(stroke_width),
        stroke_fill=stroke_ink,
    )
    draw.text(anchor_point, text, font=font, anchor=anchor, fill=fill + (255,))


def render_overlay(
    base: RasterImage,
    params: MemeParams,
    font_path: Optional[str] = None,
    inset: int = CAPTION_INSET,
) -> RasterImage:
    """
    Render captions over a copy of base.

    Text is upper-cased. Each caption is centered horizontally; the top one
    hangs from its ascender line `inset` pixels below the top edge and the
    bottom one sits on its descender line `inset` pixels above the bottom
    edge. Each run is stroked first and filled second.

    Args:
        base: Image to draw over (not modified)
        params: Caption text and colors
        font_path: Optional TrueType/OpenType font to prefer
        inset: Distance of the caption anchors from the edges

    Returns:
        A new RasterImage with the captions drawn

    Raises:
        ContextUnavailable: If a drawing surface cannot be created
    """
    if not params.has_text:
        return base.copy()

    layout = caption_layout(base.width, base.height, inset)
    canvas = base.image.copy()
    try:
        draw = ImageDraw.Draw(canvas)
        font = load_caption_font(layout.font_size, font_path)
    except (OSError, ValueError) as e:
        raise ContextUnavailable(f"Cannot acquire drawing surface: {str(e)}")

    if params.top_text:
        _draw_caption(
            draw, layout.top_anchor, params.top_text.upper(), "ma", font,
            layout.stroke_width, params.fill_color, params.stroke_color,
        )
    if params.bottom_text:
        _draw_caption(
            draw, layout.bottom_anchor, params.bottom_text.upper(), "md", font,
            layout.stroke_width, params.fill_color, params.stroke_color,
        )

    logger.debug(
        f"Rendered overlay on {base.width}x{base.height} "
        f"(font {layout.font_size}px, top={bool(params.top_text)}, bottom={bool(params.bottom_text)})"
    )
    return RasterImage(canvas)
