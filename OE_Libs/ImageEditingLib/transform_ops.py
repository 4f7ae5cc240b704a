"""
Geometric transform operations for Open Editor.

Every operation takes an immutable source RasterImage and returns a new one;
the source is never modified.

Provides:
- Resize: smooth resampling to an exact target size
- Center crop: cut the largest centered region with a given aspect ratio
- Rotate: exact transposes for right angles, affine rotation otherwise
- Flip: mirror columns or rows

Example:
    >>> img = decode_image(Path("photo.jpg").read_bytes())
    >>> square = center_crop(img, 1.0)
    >>> small = resize(square, 256, 256)
    >>> turned = rotate(small, 90)
"""

from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Tuple, Union
import logging
import math
import re

from PIL import Image

from OE_Libs.constants import (
    AXIS_HORIZONTAL,
    AXIS_VERTICAL,
    CROP_PRESETS,
    DEFAULT_RESAMPLE,
    RESAMPLE_FILTERS,
    TRANSPARENT,
)
from OE_Libs.errors import InvalidDimensions, InvalidRatio
from OE_Libs.ImageEditingLib.image_models import RasterImage

logger = logging.getLogger(__name__)

RatioLike = Union[int, float, Fraction, str]

_RESAMPLE_FILTERS = {name: Image.Resampling[name.upper()] for name in RESAMPLE_FILTERS}

# Clockwise screen rotation -> Pillow transpose (Pillow rotates counter-clockwise)
_RIGHT_ANGLE_TRANSPOSES = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_PRESET_RATIOS = {label.lower(): ratio for label, ratio in CROP_PRESETS}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ============================================================================
# Resize
# ============================================================================

def parse_dimension(value: Union[int, float, str, None]) -> int:
    """
    Parse a width/height field value.

    Numbers are truncated to int. Strings use their leading integer, and
    anything without one parses to 0.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise TypeError("Dimension cannot be a bool")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return 0
        return int(value)

    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def locked_dimension(value: int, aspect_ratio: float, edited: str = "width") -> int:
    """
    Compute the partner dimension that keeps an aspect ratio.

    Args:
        value: The edited dimension
        aspect_ratio: width / height to preserve
        edited: 'width' or 'height', the field that was edited

    Returns:
        The height for an edited width, or the width for an edited height,
        rounded half up
    """
    if aspect_ratio <= 0 or not math.isfinite(aspect_ratio):
        raise InvalidRatio(f"aspect_ratio must be a positive number, got {aspect_ratio}")

    if edited == "width":
        return _round_half_up(value / aspect_ratio)
    if edited == "height":
        return _round_half_up(value * aspect_ratio)
    raise ValueError(f"edited must be 'width' or 'height', got {edited!r}")


@dataclass(frozen=True)
class ResizeParams:
    """Target size for the resize tool.

    Attributes:
        width: Target width in pixels
        height: Target height in pixels
        lock_aspect: Recompute the partner field on every edit
    """
    width: int = 0
    height: int = 0
    lock_aspect: bool = True

    @classmethod
    def for_image(cls, image: RasterImage, lock_aspect: bool = True) -> "ResizeParams":
        return cls(width=image.width, height=image.height, lock_aspect=lock_aspect)

    def with_width(self, value: Union[int, str], aspect_ratio: float) -> "ResizeParams":
        width = parse_dimension(value)
        if self.lock_aspect:
            return replace(self, width=width, height=locked_dimension(width, aspect_ratio, "width"))
        return replace(self, width=width)

    def with_height(self, value: Union[int, str], aspect_ratio: float) -> "ResizeParams":
        height = parse_dimension(value)
        if self.lock_aspect:
            return replace(self, height=height, width=locked_dimension(height, aspect_ratio, "height"))
        return replace(self, height=height)


def resize(
    src: RasterImage,
    width: int,
    height: int,
    resample: str = DEFAULT_RESAMPLE,
) -> RasterImage:
    """
    Resample an image to an exact size.

    Args:
        src: Source image
        width: Target width (> 0)
        height: Target height (> 0)
        resample: 'bilinear' (default), 'box' (area), 'bicubic', 'lanczos'
                  or 'nearest'

    Returns:
        New RasterImage of exactly width x height

    Raises:
        InvalidDimensions: If either target dimension is not positive
        ValueError: If resample is not a known filter
    """
    if isinstance(width, bool) or isinstance(height, bool):
        raise InvalidDimensions("Target dimensions must be integers")
    if int(width) != width or int(height) != height:
        raise InvalidDimensions(f"Target dimensions must be whole pixels, got {width}x{height}")
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"Target dimensions must be positive, got {width}x{height}")

    resample_filter = _RESAMPLE_FILTERS.get(str(resample).lower())
    if resample_filter is None:
        raise ValueError(
            f"Unknown resample filter '{resample}'. "
            f"Available: {', '.join(_RESAMPLE_FILTERS)}"
        )

    resized = src.image.resize((int(width), int(height)), resample=resample_filter)
    logger.debug(f"Resized {src.width}x{src.height} -> {width}x{height} ({resample})")
    return RasterImage(resized)


# ============================================================================
# Center Crop
# ============================================================================

def parse_ratio(value: RatioLike) -> float:
    """
    Interpret a crop ratio.

    Accepts numbers, Fractions, preset labels ('Square', '1.78', ...) and
    strings like '16:9', '16/9' or '1.5'. A preset label maps to its exact
    ratio, so '1.78' is 16/9.

    Raises:
        InvalidRatio: If the value is not a positive finite ratio
    """
    if isinstance(value, bool):
        raise InvalidRatio("Ratio cannot be a bool")

    if isinstance(value, str):
        preset = _PRESET_RATIOS.get(value.strip().lower())
        if preset is not None:
            return preset

        parts = re.split(r"[:/]", value.strip())
        if len(parts) > 2:
            raise InvalidRatio(f"Invalid ratio: {value!r}")
        try:
            numbers = [float(part) for part in parts]
        except ValueError:
            raise InvalidRatio(f"Invalid ratio: {value!r}")

        if len(numbers) == 2:
            if numbers[1] == 0:
                raise InvalidRatio(f"Ratio denominator cannot be zero: {value!r}")
            ratio = numbers[0] / numbers[1]
        else:
            ratio = numbers[0]
    else:
        try:
            ratio = float(value)
        except (TypeError, ValueError):
            raise InvalidRatio(f"Invalid ratio: {value!r}")

    if not math.isfinite(ratio) or ratio <= 0:
        raise InvalidRatio(f"Ratio must be a positive number, got {value!r}")
    return ratio


def crop_box(width: int, height: int, ratio: RatioLike) -> Tuple[int, int, int, int]:
    """
    Compute the centered crop rectangle for a ratio.

    Returns:
        (left, top, right, bottom) in pixel coordinates
    """
    ratio = parse_ratio(ratio)
    new_w = float(width)
    new_h = float(height)

    if width / height > ratio:
        new_w = height * ratio
    else:
        new_h = width / ratio

    left = int((width - new_w) / 2)
    top = int((height - new_h) / 2)
    crop_w = max(1, int(new_w))
    crop_h = max(1, int(new_h))
    return left, top, left + crop_w, top + crop_h


def center_crop(src: RasterImage, ratio: RatioLike) -> RasterImage:
    """
    Crop the largest centered region with the given width:height ratio.

    The region is copied unscaled.

    Raises:
        InvalidRatio: If ratio is not positive
    """
    box = crop_box(src.width, src.height, ratio)
    cropped = src.image.crop(box)
    logger.debug(f"Center crop {src.width}x{src.height} ratio {ratio} -> box {box}")
    return RasterImage(cropped)


# ============================================================================
# Rotate
# ============================================================================

def rotated_bounds(width: int, height: int, degrees: float) -> Tuple[int, int]:
    """Size of the box that holds a width x height rectangle rotated by degrees."""
    rad = math.radians(degrees)
    cos_a = abs(math.cos(rad))
    sin_a = abs(math.sin(rad))
    # Round away float noise so e.g. 45 degrees on a square is not one pixel too big
    new_w = math.ceil(round(width * cos_a + height * sin_a, 6))
    new_h = math.ceil(round(width * sin_a + height * cos_a, 6))
    return max(1, new_w), max(1, new_h)


def rotate(src: RasterImage, degrees: float) -> RasterImage:
    """
    Rotate an image about its center.

    Positive degrees turn the picture clockwise as displayed. Right angles are
    exact pixel transposes; 90, -90 and 270 swap width and height. Other
    angles resample into a box large enough for the whole rotated image, and
    uncovered corners are transparent.

    Args:
        src: Source image
        degrees: Rotation angle in degrees

    Returns:
        New rotated RasterImage
    """
    if not math.isfinite(degrees):
        raise ValueError(f"degrees must be finite, got {degrees}")

    turns = degrees % 360
    if turns == 0:
        return src.copy()

    if turns % 90 == 0:
        rotated = src.image.transpose(_RIGHT_ANGLE_TRANSPOSES[int(turns)])
        logger.debug(f"Rotated {src.width}x{src.height} by {degrees} (transpose)")
        return RasterImage(rotated)

    new_w, new_h = rotated_bounds(src.width, src.height, degrees)
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    cx, cy = src.width / 2, src.height / 2
    ncx, ncy = new_w / 2, new_h / 2

    # Inverse mapping: output (x, y) -> source pixel
    data = (
        cos_a, sin_a, cx - ncx * cos_a - ncy * sin_a,
        -sin_a, cos_a, cy + ncx * sin_a - ncy * cos_a,
    )
    rotated = src.image.transform(
        (new_w, new_h),
        Image.Transform.AFFINE,
        data,
        resample=Image.Resampling.BICUBIC,
        fillcolor=TRANSPARENT,
    )
    logger.debug(f"Rotated {src.width}x{src.height} by {degrees} -> {new_w}x{new_h}")
    return RasterImage(rotated)


# ============================================================================
# Flip
# ============================================================================

def flip(src: RasterImage, axis: str) -> RasterImage:
    """
    Mirror an image.

    Args:
        src: Source image
        axis: 'horizontal' mirrors columns (left-right),
              'vertical' mirrors rows (top-bottom)

    Raises:
        ValueError: If axis is not recognized
    """
    axis = str(axis).lower()
    if axis == AXIS_HORIZONTAL:
        flipped = src.image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    elif axis == AXIS_VERTICAL:
        flipped = src.image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    else:
        raise ValueError(
            f"Invalid axis: {axis}. Must be '{AXIS_HORIZONTAL}' or '{AXIS_VERTICAL}'"
        )

    logger.debug(f"Flipped {src.width}x{src.height} {axis}")
    return RasterImage(flipped)
