"""
ImageEditingLib - Core image editing functionality

This module provides the raster model, bitmap store, transforms, caption
overlay, color sampling and export encoding for the Open Editor project.
"""

from OE_Libs.ImageEditingLib.image_models import (
    RasterImage,
    RgbColor,
    RgbaColor,
    SampledColor,
    format_hex,
    parse_color,
)
from OE_Libs.ImageEditingLib.bitmap_store import BitmapStore, decode_image
from OE_Libs.ImageEditingLib.transform_ops import (
    ResizeParams,
    center_crop,
    crop_box,
    flip,
    locked_dimension,
    parse_dimension,
    parse_ratio,
    resize,
    rotate,
    rotated_bounds,
)
from OE_Libs.ImageEditingLib.overlay_renderer import (
    CaptionLayout,
    MemeParams,
    caption_layout,
    render_overlay,
)
from OE_Libs.ImageEditingLib.color_sampler import map_display_point, sample_color
from OE_Libs.ImageEditingLib.encoder import (
    ExportConfig,
    ExportResult,
    encode,
    export_image,
    file_extension,
    normalize_format,
)

__all__ = [
    "RasterImage",
    "RgbColor",
    "RgbaColor",
    "SampledColor",
    "format_hex",
    "parse_color",
    "BitmapStore",
    "decode_image",
    "ResizeParams",
    "center_crop",
    "crop_box",
    "flip",
    "locked_dimension",
    "parse_dimension",
    "parse_ratio",
    "resize",
    "rotate",
    "rotated_bounds",
    "CaptionLayout",
    "MemeParams",
    "caption_layout",
    "render_overlay",
    "map_display_point",
    "sample_color",
    "ExportConfig",
    "ExportResult",
    "encode",
    "export_image",
    "file_extension",
    "normalize_format",
]
