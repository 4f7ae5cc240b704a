"""
Image export encoder for Open Editor.

Serializes a RasterImage to JPEG, PNG or WEBP bytes. Lossy formats take a
quality in [0.1, 1.0]; PNG ignores it.

Classes:
    ExportConfig: Output format and quality
    ExportResult: Encoded bytes with format, extension and suggested filename

Functions:
    encode: Encode an image to bytes
    export_image: Encode with an ExportConfig and build an ExportResult
    normalize_format: Map 'jpg', 'image/png', ... to a canonical format name
"""

from dataclasses import asdict, dataclass
from io import BytesIO
from typing import Any, Dict
import logging

from PIL import features

from OE_Libs.constants import (
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_QUALITY,
    DOWNLOAD_BASENAME,
    EXPORT_FORMATS,
    LOSSLESS_FORMATS,
    MAX_QUALITY,
    MIN_QUALITY,
)
from OE_Libs.errors import EncodeError, InvalidQuality
from OE_Libs.ImageEditingLib.image_models import RasterImage

logger = logging.getLogger(__name__)

_FORMAT_ALIASES = {
    "JPG": "JPEG",
    "IMAGE/JPEG": "JPEG",
    "IMAGE/PNG": "PNG",
    "IMAGE/WEBP": "WEBP",
}

_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}

# Codecs that are optional in a Pillow build
_OPTIONAL_CODECS = {
    "JPEG": ("codec", "jpg"),
    "WEBP": ("module", "webp"),
}


def normalize_format(value: str) -> str:
    """
    Map a format name or MIME type to 'JPEG', 'PNG' or 'WEBP'.

    Raises:
        EncodeError: If the format is not an export format
    """
    name = str(value).strip().upper()
    name = _FORMAT_ALIASES.get(name, name)
    if name not in EXPORT_FORMATS:
        raise EncodeError(
            f"Unsupported export format '{value}'. "
            f"Available: {', '.join(EXPORT_FORMATS)}"
        )
    return name


def mime_type(fmt: str) -> str:
    return _MIME_TYPES[normalize_format(fmt)]


def file_extension(fmt: str) -> str:
    """Extension taken from the MIME subtype ('jpeg', 'png', 'webp')."""
    return mime_type(fmt).split("/")[1]


def is_lossless(fmt: str) -> bool:
    return normalize_format(fmt) in LOSSLESS_FORMATS


def validate_quality(quality: float) -> float:
    """
    Check a quality value is inside [0.1, 1.0].

    Raises:
        InvalidQuality: If quality is out of range or not a number
    """
    if isinstance(quality, bool):
        raise InvalidQuality("quality cannot be a bool")
    try:
        value = float(quality)
    except (TypeError, ValueError):
        raise InvalidQuality(f"quality must be a number, got {quality!r}")
    if not (MIN_QUALITY <= value <= MAX_QUALITY):
        raise InvalidQuality(f"quality must be {MIN_QUALITY}-{MAX_QUALITY}, got {quality}")
    return value


def _codec_available(fmt: str) -> bool:
    kind, name = _OPTIONAL_CODECS.get(fmt, (None, None))
    if kind == "codec":
        return bool(features.check_codec(name))
    if kind == "module":
        return bool(features.check_module(name))
    return True


def _save_kwargs(fmt: str, quality: float) -> Dict[str, Any]:
    """Get PIL Image.save() kwargs for a format."""
    kwargs: Dict[str, Any] = {"format": fmt}
    if fmt in LOSSLESS_FORMATS:
        return kwargs

    kwargs["quality"] = max(1, min(100, int(round(quality * 100))))
    if fmt == "WEBP":
        kwargs["lossless"] = False
    return kwargs


def encode(image: RasterImage, fmt: str, quality: float = DEFAULT_QUALITY) -> bytes:
    """
    Encode an image.

    JPEG has no alpha channel, so the image is flattened to RGB first.

    Args:
        image: Image to encode
        fmt: 'JPEG', 'PNG' or 'WEBP' (aliases and MIME types accepted)
        quality: 0.1-1.0, passed to lossy codecs, ignored by PNG

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the format is unsupported or encoding fails
        InvalidQuality: If quality is out of range
    """
    fmt = normalize_format(fmt)
    quality = validate_quality(quality)

    if not _codec_available(fmt):
        raise EncodeError(f"{fmt} encoding is not available in this Pillow build")

    source = image.image
    if fmt == "JPEG":
        source = source.convert("RGB")

    buffer = BytesIO()
    try:
        source.save(buffer, **_save_kwargs(fmt, quality))
    except (OSError, KeyError, ValueError) as e:
        raise EncodeError(f"Failed to encode {fmt}: {str(e)}")

    data = buffer.getvalue()
    logger.debug(f"Encoded {image.width}x{image.height} as {fmt} q={quality}: {len(data)} bytes")
    return data


@dataclass
class ExportConfig:
    """Export settings.

    Attributes:
        format: 'JPEG', 'PNG' or 'WEBP'
        quality: 0.1-1.0; stored even for lossless formats
    """
    format: str = DEFAULT_OUTPUT_FORMAT
    quality: float = DEFAULT_QUALITY

    def __post_init__(self):
        """Validate and normalize fields."""
        self.format = normalize_format(self.format)
        self.quality = validate_quality(self.quality)

    @property
    def extension(self) -> str:
        return file_extension(self.format)

    @property
    def lossless(self) -> bool:
        return self.format in LOSSLESS_FORMATS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass(frozen=True)
class ExportResult:
    """Encoded image ready to hand to a download or save step."""
    data: bytes
    format: str
    extension: str
    filename: str

    @property
    def mime_type(self) -> str:
        return mime_type(self.format)


def export_image(
    image: RasterImage,
    config: ExportConfig,
    basename: str = DOWNLOAD_BASENAME,
) -> ExportResult:
    """Encode an image with config and attach a suggested filename."""
    data = encode(image, config.format, config.quality)
    extension = config.extension
    result = ExportResult(
        data=data,
        format=config.format,
        extension=extension,
        filename=f"{basename}.{extension}",
    )
    logger.info(f"Exported {result.filename} ({len(data)} bytes)")
    return result
