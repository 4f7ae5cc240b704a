"""
Color sampling for Open Editor.

Maps a point in the displayed (possibly scaled) image box back to a backing
pixel and reads its color. Sampling never modifies the image.
"""

import logging
import math
from typing import Sequence, Tuple

from OE_Libs.errors import InvalidDimensions
from OE_Libs.ImageEditingLib.image_models import RasterImage, SampledColor

logger = logging.getLogger(__name__)


def map_display_point(
    image_size: Sequence[int],
    display_point: Sequence[float],
    display_size: Sequence[float],
) -> Tuple[int, int]:
    """
    Map a display-space point to a backing-pixel coordinate.

    Each axis is scaled independently by image / display size, floored, and
    clamped to the image bounds.

    Raises:
        InvalidDimensions: If a display dimension is not positive, or the
            point or size is not finite
    """
    display_w, display_h = display_size
    finite = math.isfinite(display_w) and math.isfinite(display_h)
    if not finite or display_w <= 0 or display_h <= 0:
        raise InvalidDimensions(f"Display size must be positive, got {display_w}x{display_h}")

    px, py = display_point[0], display_point[1]
    if not (math.isfinite(px) and math.isfinite(py)):
        raise InvalidDimensions(f"Display point must be finite, got ({px}, {py})")

    width, height = image_size
    scale_x = width / display_w
    scale_y = height / display_h

    x = int(math.floor(px * scale_x))
    y = int(math.floor(py * scale_y))
    return min(max(x, 0), width - 1), min(max(y, 0), height - 1)


def sample_color(
    image: RasterImage,
    display_point: Sequence[float],
    display_size: Sequence[float],
) -> SampledColor:
    """
    Read the color under a display-space point.

    Args:
        image: Image being shown
        display_point: (x, y) relative to the top-left of the displayed box
        display_size: (width, height) of the displayed box

    Returns:
        SampledColor with '#rrggbb' hex (alpha ignored)
    """
    x, y = map_display_point(image.size, display_point, display_size)
    color = SampledColor.from_rgb(image.pixel(x, y))
    logger.debug(f"Sampled {color.hex} at pixel ({x}, {y})")
    return color
