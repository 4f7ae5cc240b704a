"""
Editor Session for Open Editor.

The session is the command surface a UI shell drives. It owns the bitmap
store, the active tool and each tool's parameters, and sequences calls into
the transform engine, overlay renderer, color sampler and encoder.

States are the ToolType values plus NO_IMAGE before a load. Selecting a tool
never touches the image. Destructive operations (load, resize, crop, rotate,
flip) replace the current image in one step and reset the resize fields to
the new size; sampling, rendering and downloading only read.

Example:
    >>> session = EditorSession(initial_tool=ToolType.CROP)
    >>> session.load_file("photo.jpg")
    >>> session.apply_crop("16:9")
    >>> session.select_tool(ToolType.MEME)
    >>> session.set_meme_text(top="hello", bottom="world")
    >>> result = session.download_image()
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence, Union
import logging
import threading

from OE_Libs.errors import NoImageLoaded, OperationInProgress
from OE_Libs.EditorLib.editor_settings import EditorSettings
from OE_Libs.EditorLib.tools import NO_IMAGE, ToolType, coerce_tool
from OE_Libs.ImageEditingLib.bitmap_store import BitmapStore
from OE_Libs.ImageEditingLib.color_sampler import sample_color
from OE_Libs.ImageEditingLib.encoder import ExportConfig, ExportResult, export_image
from OE_Libs.ImageEditingLib.image_models import ColorLike, RasterImage, SampledColor
from OE_Libs.ImageEditingLib.overlay_renderer import MemeParams, render_overlay
from OE_Libs.ImageEditingLib.transform_ops import (
    RatioLike,
    ResizeParams,
    center_crop,
    flip,
    resize,
    rotate,
)

logger = logging.getLogger(__name__)

Transform = Callable[[RasterImage], RasterImage]

# Tools whose display frame is the current image as-is
_PLAIN_FRAME_TOOLS = (
    ToolType.RESIZE,
    ToolType.CROP,
    ToolType.COMPRESS,
    ToolType.CONVERT,
    ToolType.ROTATE,
    ToolType.PICKER,
)


class EditorSession:
    """
    One caller's editing session over a single working image.

    Attributes:
        settings: Defaults the session was created with
        active_tool: Currently selected ToolType
        resize_params: Target size fields for the resize tool
        meme_params: Caption overlay parameters
        export_config: Output format and quality
        picked_color: Last color picked with the picker tool
    """

    def __init__(
        self,
        initial_tool: Optional[Union[str, ToolType]] = None,
        settings: Optional[EditorSettings] = None,
    ):
        self.settings = settings or EditorSettings()
        self.active_tool = coerce_tool(initial_tool or self.settings.initial_tool)
        self.resize_params = ResizeParams(lock_aspect=self.settings.lock_aspect)
        self.meme_params = MemeParams(
            fill_color=self.settings.fill_color,
            stroke_color=self.settings.stroke_color,
        )
        self.export_config = ExportConfig(
            format=self.settings.output_format,
            quality=self.settings.quality,
        )
        self.picked_color: Optional[SampledColor] = None

        self._store = BitmapStore()
        self._guard = threading.Lock()
        self._running: Optional[str] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> Union[str, ToolType]:
        """NO_IMAGE before a load, otherwise the active tool."""
        if self._store.is_empty:
            return NO_IMAGE
        return self.active_tool

    @property
    def has_image(self) -> bool:
        return not self._store.is_empty

    @property
    def current(self) -> RasterImage:
        return self._store.current

    @property
    def original(self) -> RasterImage:
        return self._store.original

    @property
    def aspect_ratio(self) -> float:
        """Width / height of the first loaded image."""
        original = self._store.original
        return original.width / original.height

    @property
    def busy(self) -> bool:
        return self._guard.locked()

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        """Hold the session for one destructive operation, rejecting overlap."""
        if not self._guard.acquire(blocking=False):
            running = self._running or "another operation"
            logger.warning(f"Rejected '{operation}': '{running}' is in progress")
            raise OperationInProgress(operation, running)

        self._running = operation
        try:
            yield
        finally:
            self._running = None
            self._guard.release()

    def _reset_resize_params(self, image: RasterImage) -> None:
        self.resize_params = ResizeParams.for_image(image, lock_aspect=self.settings.lock_aspect)

    def _apply(self, operation: str, transform: Transform) -> RasterImage:
        """Run a transform on the current image and swap in its result."""
        with self._exclusive(operation):
            result = transform(self._store.current)
            self._store.replace(result)
            self._reset_resize_params(result)

        logger.info(f"{operation}: current image is now {result.width}x{result.height}")
        return result

    # ------------------------------------------------------------------
    # Loading and tools
    # ------------------------------------------------------------------

    def load(self, data: bytes) -> RasterImage:
        """
        Decode bytes into the session, replacing any previous image.

        On failure the session keeps its prior state.

        Raises:
            DecodeError: If the bytes cannot be decoded
            OperationInProgress: If another destructive operation is running
        """
        with self._exclusive("load"):
            image = self._store.load(data)
            self._reset_resize_params(image)
            self.picked_color = None
        return image

    def load_file(self, path: Union[str, Path]) -> RasterImage:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image file not found: {path}")
        return self.load(path.read_bytes())

    def select_tool(self, tool: Union[str, ToolType]) -> ToolType:
        self.active_tool = coerce_tool(tool)
        logger.debug(f"Selected tool {self.active_tool.value}")
        return self.active_tool

    def start_over(self) -> None:
        """Discard the original and current image and return to NO_IMAGE."""
        with self._exclusive("start_over"):
            self._store.clear()
            self.resize_params = ResizeParams(lock_aspect=self.settings.lock_aspect)
            self.picked_color = None
        logger.info("Session reset")

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------

    def set_resize_width(self, value: Union[int, str]) -> ResizeParams:
        """Edit the width field; with the aspect lock on, height follows."""
        self.resize_params = self.resize_params.with_width(value, self.aspect_ratio)
        return self.resize_params

    def set_resize_height(self, value: Union[int, str]) -> ResizeParams:
        """Edit the height field; with the aspect lock on, width follows."""
        self.resize_params = self.resize_params.with_height(value, self.aspect_ratio)
        return self.resize_params

    def set_lock_aspect(self, locked: bool) -> ResizeParams:
        self.resize_params = ResizeParams(
            width=self.resize_params.width,
            height=self.resize_params.height,
            lock_aspect=bool(locked),
        )
        return self.resize_params

    def apply_resize(self) -> RasterImage:
        """
        Resize the current image to the resize fields.

        Raises:
            InvalidDimensions: If a field is not positive
        """
        params = self.resize_params
        return self._apply(
            "resize",
            lambda image: resize(image, params.width, params.height, self.settings.resample),
        )

    # ------------------------------------------------------------------
    # Crop, rotate, flip
    # ------------------------------------------------------------------

    def apply_crop(self, ratio: RatioLike) -> RasterImage:
        """
        Center-crop the current image to a width:height ratio.

        Raises:
            InvalidRatio: If ratio is not positive
        """
        return self._apply("crop", lambda image: center_crop(image, ratio))

    def rotate_image(self, degrees: float) -> RasterImage:
        return self._apply("rotate", lambda image: rotate(image, degrees))

    def flip_image(self, axis: str) -> RasterImage:
        return self._apply("flip", lambda image: flip(image, axis))

    # ------------------------------------------------------------------
    # Caption overlay
    # ------------------------------------------------------------------

    def set_meme_text(
        self,
        top: Optional[str] = None,
        bottom: Optional[str] = None,
        fill_color: Optional[ColorLike] = None,
        stroke_color: Optional[ColorLike] = None,
    ) -> MemeParams:
        """Update caption parameters; arguments left as None keep their value."""
        self.meme_params = self.meme_params.updated(
            top_text=top,
            bottom_text=bottom,
            fill_color=fill_color,
            stroke_color=stroke_color,
        )
        return self.meme_params

    def render(self) -> RasterImage:
        """
        Build the display frame from the current image.

        The caption overlay is drawn when the meme tool is active. The frame is
        rebuilt from the current image on every call and never stored.

        Raises:
            NoImageLoaded: Before a load
            ContextUnavailable: If the overlay cannot be drawn
        """
        current = self._store.current
        tool = self.active_tool

        if tool is ToolType.MEME:
            return render_overlay(
                current,
                self.meme_params,
                font_path=self.settings.font_path,
                inset=self.settings.text_inset,
            )
        if tool in _PLAIN_FRAME_TOOLS:
            return current
        raise ValueError(f"No frame renderer for tool {tool}")

    # ------------------------------------------------------------------
    # Color picking
    # ------------------------------------------------------------------

    def sample_color(
        self,
        display_point: Sequence[float],
        display_size: Sequence[float],
    ) -> SampledColor:
        """Read the color of the displayed frame under a display-space point."""
        return sample_color(self.render(), display_point, display_size)

    def pick_color(
        self,
        display_point: Sequence[float],
        display_size: Sequence[float],
    ) -> Optional[SampledColor]:
        """
        Handle a click on the displayed image.

        Only the picker tool samples; for any other tool the click is ignored
        and None is returned.
        """
        tool = self.active_tool
        if tool is ToolType.PICKER:
            self.picked_color = self.sample_color(display_point, display_size)
            return self.picked_color
        if tool is ToolType.MEME or tool in _PLAIN_FRAME_TOOLS:
            logger.debug(f"Ignoring canvas click with tool {tool.value}")
            return None
        raise ValueError(f"No click handler for tool {tool}")

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def set_quality(self, quality: float) -> ExportConfig:
        """
        Set export quality.

        Raises:
            InvalidQuality: If quality is outside 0.1-1.0
        """
        self.export_config = ExportConfig(format=self.export_config.format, quality=quality)
        return self.export_config

    def set_output_format(self, fmt: str) -> ExportConfig:
        """
        Set export format.

        Raises:
            EncodeError: If the format is not JPEG, PNG or WEBP
        """
        self.export_config = ExportConfig(format=fmt, quality=self.export_config.quality)
        return self.export_config

    def download_image(self) -> ExportResult:
        """
        Encode the displayed frame with the export settings.

        Raises:
            NoImageLoaded: Before a load
            EncodeError: If encoding fails
        """
        if not self.has_image:
            raise NoImageLoaded("Nothing to download: no image loaded")
        return export_image(self.render(), self.export_config, self.settings.download_basename)
