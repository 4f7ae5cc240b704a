"""
Editor settings storage for Open Editor.

Settings seed a new EditorSession: the tool it opens with, export defaults,
caption styling and the download filename. They are persisted as a JSON
object; unknown keys are ignored on load so older files keep working.

Functions:
    load_settings: Load EditorSettings from a JSON file
    save_settings: Save EditorSettings to a JSON file
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging

from OE_Libs.constants import (
    CAPTION_INSET,
    DEFAULT_FILL_COLOR,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_QUALITY,
    DEFAULT_RESAMPLE,
    DEFAULT_STROKE_COLOR,
    DOWNLOAD_BASENAME,
    RESAMPLE_FILTERS,
)
from OE_Libs.errors import EncodeError
from OE_Libs.EditorLib.tools import ToolType, coerce_tool
from OE_Libs.ImageEditingLib.encoder import normalize_format, validate_quality
from OE_Libs.ImageEditingLib.image_models import format_hex, parse_color

logger = logging.getLogger(__name__)


@dataclass
class EditorSettings:
    """Defaults for an editor session.

    Attributes:
        initial_tool: Tool active after the first load
        output_format: Export format (JPEG, PNG, WEBP)
        quality: Export quality 0.1-1.0
        lock_aspect: Whether resize starts with the aspect ratio locked
        resample: Resize filter name
        text_inset: Caption distance from the top/bottom edges in pixels
        font_path: Preferred caption font file (None = system lookup)
        fill_color: Caption fill color '#rrggbb'
        stroke_color: Caption outline color '#rrggbb'
        download_basename: Filename stem for exports
    """
    initial_tool: str = ToolType.RESIZE.value
    output_format: str = DEFAULT_OUTPUT_FORMAT
    quality: float = DEFAULT_QUALITY
    lock_aspect: bool = True
    resample: str = DEFAULT_RESAMPLE
    text_inset: int = CAPTION_INSET
    font_path: Optional[str] = None
    fill_color: str = DEFAULT_FILL_COLOR
    stroke_color: str = DEFAULT_STROKE_COLOR
    download_basename: str = DOWNLOAD_BASENAME

    def __post_init__(self):
        """Validate and normalize fields."""
        self.initial_tool = coerce_tool(self.initial_tool).value
        try:
            self.output_format = normalize_format(self.output_format)
        except EncodeError as e:
            raise ValueError(str(e))
        self.quality = validate_quality(self.quality)
        self.lock_aspect = bool(self.lock_aspect)

        self.resample = str(self.resample).lower()
        if self.resample not in RESAMPLE_FILTERS:
            raise ValueError(
                f"Unknown resample filter '{self.resample}'. "
                f"Available: {', '.join(RESAMPLE_FILTERS)}"
            )

        self.text_inset = int(self.text_inset)
        if self.text_inset < 0:
            raise ValueError(f"text_inset must be >= 0, got {self.text_inset}")

        self.fill_color = format_hex(parse_color(self.fill_color))
        self.stroke_color = format_hex(parse_color(self.stroke_color))

        self.download_basename = str(self.download_basename).strip()
        if not self.download_basename:
            raise ValueError("download_basename cannot be empty")

    @property
    def tool(self) -> ToolType:
        return ToolType(self.initial_tool)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorSettings":
        """Create from dictionary, ignoring unknown keys."""
        unknown = sorted(k for k in data if k not in cls.__dataclass_fields__)
        if unknown:
            logger.debug(f"Ignoring unknown settings keys: {', '.join(unknown)}")
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


def load_settings(path: Union[str, Path]) -> EditorSettings:
    """
    Load settings from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON object or holds invalid values
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid settings file {path}: {str(e)}")

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a JSON object: {path}")

    settings = EditorSettings.from_dict(data)
    logger.info(f"Loaded editor settings from {path}")
    return settings


def save_settings(settings: EditorSettings, path: Union[str, Path]) -> Path:
    """Save settings as pretty-printed JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
    logger.debug(f"Saved editor settings to {path}")
    return path
