"""
Bitmap Store for Open Editor.

Owns the first decoded image (kept for its aspect ratio) and the current
working image. The current slot is replaced wholesale; there is no in-place
pixel write.

Classes:
    BitmapStore: Single-slot holder for the original and current RasterImage

Functions:
    decode_image: Decode encoded image bytes into a RasterImage
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from OE_Libs.constants import SUPPORTED_DECODE_FORMATS
from OE_Libs.errors import DecodeError, NoImageLoaded, UnsupportedFormat
from OE_Libs.ImageEditingLib.image_models import RasterImage

logger = logging.getLogger(__name__)


def decode_image(data: bytes) -> RasterImage:
    """
    Decode an encoded image byte stream.

    The whole pixel buffer is decoded before returning so a truncated file
    fails here rather than on first use. Animated formats yield their first
    frame. An EXIF Orientation tag is applied, so the result is upright and
    its size is the displayed size.

    Args:
        data: Encoded bytes (JPEG, PNG, WEBP, GIF, BMP or TIFF)

    Returns:
        A RasterImage in RGBA mode

    Raises:
        UnsupportedFormat: If the bytes are not a recognized image format
        DecodeError: If the bytes are recognized but malformed
    """
    if not data:
        raise DecodeError("Cannot decode an empty byte stream")

    try:
        img = Image.open(BytesIO(data), formats=SUPPORTED_DECODE_FORMATS)
    except UnidentifiedImageError as e:
        raise UnsupportedFormat(f"Unrecognized image format: {str(e)}")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to open image: {str(e)}")

    try:
        with img:
            if getattr(img, "n_frames", 1) > 1:
                img.seek(0)
            img.load()
            upright = ImageOps.exif_transpose(img)
            raster = RasterImage.from_pil(upright)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode {img.format} image: {str(e)}")

    logger.debug(f"Decoded {img.format} image {raster.width}x{raster.height}")
    return raster


class BitmapStore:
    """
    Holds the original and current image for one editing session.

    Example:
        >>> store = BitmapStore()
        >>> store.load(Path("photo.png").read_bytes())
        >>> store.replace(rotate(store.current, 90))
    """

    def __init__(self):
        """Initialize an empty store."""
        self._original: Optional[RasterImage] = None
        self._current: Optional[RasterImage] = None

    @property
    def is_empty(self) -> bool:
        return self._current is None

    @property
    def original(self) -> RasterImage:
        if self._original is None:
            raise NoImageLoaded("No image has been loaded")
        return self._original

    @property
    def current(self) -> RasterImage:
        if self._current is None:
            raise NoImageLoaded("No image has been loaded")
        return self._current

    def load(self, data: bytes) -> RasterImage:
        """
        Decode bytes and make the result both original and current.

        The store is left untouched if decoding fails.

        Raises:
            DecodeError: If the bytes cannot be decoded
        """
        raster = decode_image(data)
        self._original = raster
        self._current = raster
        logger.info(f"Loaded image {raster.width}x{raster.height}")
        return raster

    def load_file(self, path: Union[str, Path]) -> RasterImage:
        """
        Read an image file from disk and load it.

        Raises:
            FileNotFoundError: If the file does not exist
            DecodeError: If the file cannot be decoded
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image file not found: {path}")
        return self.load(path.read_bytes())

    def replace(self, image: RasterImage) -> None:
        """Swap the current image for a new, fully-formed one."""
        if not isinstance(image, RasterImage):
            raise TypeError(f"Expected RasterImage, got {type(image)}")
        if self._current is None:
            raise NoImageLoaded("Cannot replace the current image before a load")

        previous = self._current
        self._current = image
        logger.debug(
            f"Replaced current image {previous.width}x{previous.height} "
            f"-> {image.width}x{image.height}"
        )

    def clear(self) -> None:
        """Discard both the original and current image."""
        self._original = None
        self._current = None
        logger.debug("Bitmap store cleared")
