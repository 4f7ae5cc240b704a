"""
Image editing data models for Open Editor.

This module defines core data structures used throughout the image editing system.

Classes:
    RasterImage: Immutable RGBA bitmap wrapper around a Pillow image
    SampledColor: A single sampled pixel color as hex and RGB

Functions:
    parse_color: Normalize a '#rrggbb' string or RGB tuple to an RgbColor
    format_hex: Format an RgbColor as '#rrggbb'

Type Aliases:
    RgbColor: A tuple of 3 integers representing RGB color values (0-255)
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass
from typing import Any, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from OE_Libs.constants import WORKING_MODE

RgbColor = Tuple[int, int, int]
RgbaColor = Tuple[int, int, int, int]
ColorLike = Union[str, Sequence[int]]


@dataclass(frozen=True)
class RasterImage:
    """An RGBA bitmap with fixed width and height.

    Instances are never modified after construction. Every transform returns
    a new RasterImage, so a reference held by a caller always describes a
    fully-formed image.

    Attributes:
        image: Pillow image in RGBA mode owning the pixel buffer
    """
    image: Any

    def __post_init__(self):
        """Validate the wrapped image."""
        if not hasattr(self.image, "mode") or not hasattr(self.image, "size"):
            raise TypeError(f"Expected PIL Image, got {type(self.image)}")

        if self.image.mode != WORKING_MODE:
            raise ValueError(f"RasterImage requires {WORKING_MODE} mode, got {self.image.mode}")

    @classmethod
    def from_pil(cls, image: Any) -> "RasterImage":
        """Wrap a copy of a Pillow image, converting to RGBA when needed."""
        if image.mode != WORKING_MODE:
            return cls(image.convert(WORKING_MODE))
        return cls(image.copy())

    @classmethod
    def from_pixels(cls, pixels: np.ndarray) -> "RasterImage":
        """Build an image from a (height, width, 4) uint8 array."""
        array = np.asarray(pixels, dtype=np.uint8)
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError(f"Expected (height, width, 4) array, got shape {array.shape}")
        return cls(Image.fromarray(np.ascontiguousarray(array)))

    @classmethod
    def new(cls, width: int, height: int, color: ColorLike = (0, 0, 0, 0)) -> "RasterImage":
        """Create a solid-color image."""
        if isinstance(color, str):
            fill = parse_color(color) + (255,)
        else:
            fill = tuple(int(c) for c in color)
            if len(fill) == 3:
                fill = fill + (255,)
        return cls(Image.new(WORKING_MODE, (width, height), fill))

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def pixels(self) -> np.ndarray:
        """Read-only copy of the pixel buffer, shape (height, width, 4)."""
        array = np.array(self.image, dtype=np.uint8)
        array.setflags(write=False)
        return array

    def pixel(self, x: int, y: int) -> RgbaColor:
        return self.image.getpixel((x, y))

    def copy(self) -> "RasterImage":
        return RasterImage(self.image.copy())

    def same_pixels(self, other: "RasterImage") -> bool:
        """True when both images have the same size and identical pixels."""
        if self.size != other.size:
            return False
        return bool(np.array_equal(np.asarray(self.image), np.asarray(other.image)))


@dataclass(frozen=True)
class SampledColor:
    """Result of sampling a single pixel.

    Attributes:
        hex: Color as '#rrggbb' (lower case, no alpha)
        rgb: Color as an (R, G, B) tuple
    """
    hex: str
    rgb: RgbColor

    @classmethod
    def from_rgb(cls, rgb: Sequence[int]) -> "SampledColor":
        color = (int(rgb[0]), int(rgb[1]), int(rgb[2]))
        return cls(hex=format_hex(color), rgb=color)


def parse_color(value: ColorLike) -> RgbColor:
    """
    Normalize a color value to an RGB tuple.

    Args:
        value: '#rrggbb' / 'rrggbb' / '#rgb' string or a sequence of 3+ ints

    Returns:
        An (R, G, B) tuple with components in 0-255

    Raises:
        ValueError: If the value cannot be interpreted as a color
    """
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise ValueError(f"Invalid hex color: {value!r}")
        try:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError:
            raise ValueError(f"Invalid hex color: {value!r}")

    try:
        components = tuple(int(c) for c in value)
    except TypeError:
        raise ValueError(f"Invalid color: {value!r}")

    if len(components) < 3:
        raise ValueError(f"Color needs 3 components, got {value!r}")
    if any(not (0 <= c <= 255) for c in components[:3]):
        raise ValueError(f"Color components must be 0-255, got {value!r}")
    return components[0], components[1], components[2]


def format_hex(rgb: Sequence[int]) -> str:
    """Format an RGB color as '#rrggbb'."""
    return "#{:02x}{:02x}{:02x}".format(int(rgb[0]), int(rgb[1]), int(rgb[2]))
