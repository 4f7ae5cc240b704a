"""
Constants and configuration values for Open Editor.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editor.
"""

# Decoding
SUPPORTED_DECODE_FORMATS = ("JPEG", "PNG", "WEBP", "GIF", "BMP", "TIFF")
WORKING_MODE = "RGBA"

# Resize
DEFAULT_RESAMPLE = "bilinear"
RESAMPLE_FILTERS = ("nearest", "bilinear", "box", "bicubic", "lanczos")

# Crop presets (label, ratio)
CROP_PRESETS = (
    ("Square", 1.0),
    ("1.78", 16 / 9),
    ("1.33", 4 / 3),
    ("1.50", 3 / 2),
    ("0.67", 2 / 3),
    ("0.56", 9 / 16),
)

# Rotate
TRANSPARENT = (0, 0, 0, 0)

# Flip axes
AXIS_HORIZONTAL = "horizontal"
AXIS_VERTICAL = "vertical"

# Caption overlay
CAPTION_FONT_DIVISOR = 10
CAPTION_STROKE_DIVISOR = 15
CAPTION_INSET = 10
DEFAULT_FILL_COLOR = "#ffffff"
DEFAULT_STROKE_COLOR = "#000000"
CAPTION_FONT_CANDIDATES = (
    "Impact.ttf",
    "impact.ttf",
    r"C:\Windows\Fonts\impact.ttf",
    "/Library/Fonts/Impact.ttf",
    "/System/Library/Fonts/Supplemental/Impact.ttf",
    "/usr/share/fonts/truetype/msttcorefonts/Impact.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
)

# Export
EXPORT_FORMATS = ("JPEG", "PNG", "WEBP")
LOSSLESS_FORMATS = ("PNG",)
DEFAULT_OUTPUT_FORMAT = "JPEG"
DEFAULT_QUALITY = 0.8
MIN_QUALITY = 0.1
MAX_QUALITY = 1.0
DOWNLOAD_BASENAME = "edited-image"
