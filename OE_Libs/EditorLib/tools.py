"""
Editor tool identifiers and catalog.

Classes:
    ToolType: The editor tools a session can have active
    ToolInfo: Display title and description for a tool

Functions:
    coerce_tool: Accept a ToolType or its name and return the ToolType
    get_tool_catalog: List ToolInfo entries in display order
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Union

NO_IMAGE = "NO_IMAGE"


class ToolType(str, Enum):
    RESIZE = "RESIZE"
    CROP = "CROP"
    COMPRESS = "COMPRESS"
    CONVERT = "CONVERT"
    ROTATE = "ROTATE"
    MEME = "MEME"
    PICKER = "PICKER"


@dataclass(frozen=True)
class ToolInfo:
    tool: ToolType
    title: str
    description: str


_CATALOG = (
    ToolInfo(ToolType.RESIZE, "Resize Image", "Resize images to exact pixels."),
    ToolInfo(ToolType.CROP, "Crop Image", "Center-crop to a preset aspect ratio."),
    ToolInfo(ToolType.COMPRESS, "Compress Image", "Trade quality for a smaller file."),
    ToolInfo(ToolType.CONVERT, "Image Converter", "Convert between JPEG, PNG and WEBP."),
    ToolInfo(ToolType.ROTATE, "Rotate & Flip", "Rotate images 90° or flip them."),
    ToolInfo(ToolType.MEME, "Meme Generator", "Add text captions to your images."),
    ToolInfo(ToolType.PICKER, "Color Picker", "Pick colors directly from your image."),
)


def coerce_tool(value: Union[str, ToolType]) -> ToolType:
    """
    Return the ToolType for a ToolType or a case-insensitive tool name.

    Raises:
        ValueError: If the name is not an editor tool
    """
    if isinstance(value, ToolType):
        return value
    name = str(value).strip().upper()
    try:
        return ToolType(name)
    except ValueError:
        available = ", ".join(t.value for t in ToolType)
        raise ValueError(f"Unknown tool '{value}'. Available tools: {available}")


def get_tool_catalog() -> List[ToolInfo]:
    return list(_CATALOG)
