"""
Open Editor command line.

Loads one image, applies the requested edits in a fixed order (resize, crop,
rotate, flip, caption) and writes the export next to the other outputs.

Examples:
    python open_editor.py photo.png --resize 800x0 --crop 1:1 --format webp --quality 0.6
    python open_editor.py photo.jpg --rotate 90 --flip horizontal --output out/
    python open_editor.py photo.jpg --top "hello" --bottom "world" --format png
"""

from pathlib import Path
from typing import List, Optional, Tuple
import argparse
import logging
import sys

from OE_Libs.errors import EditorError, InvalidDimensions
from OE_Libs.EditorLib import (
    EditorSession,
    EditorSettings,
    ToolType,
    get_tool_catalog,
    load_settings,
)
from OE_Libs.ImageEditingLib.transform_ops import parse_dimension

logger = logging.getLogger("open_editor")


def parse_size(value: str) -> Tuple[int, int]:
    """
    Parse 'WxH'. A 0 on one side means 'follow the aspect ratio'.

    Raises:
        InvalidDimensions: If the value is not of the form WxH
    """
    parts = value.lower().split("x")
    if len(parts) != 2:
        raise InvalidDimensions(f"Size must look like WIDTHxHEIGHT, got {value!r}")
    return parse_dimension(parts[0]), parse_dimension(parts[1])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="open-editor",
        description="Resize, crop, rotate, flip, caption and convert an image.",
    )
    parser.add_argument("input", nargs="?", help="Image file to edit")
    parser.add_argument("--resize", metavar="WxH", help="Target size; 0 on one side keeps the aspect ratio")
    parser.add_argument("--no-lock-aspect", action="store_true", help="Use --resize exactly as given")
    parser.add_argument("--crop", metavar="RATIO", help="Center-crop ratio, e.g. Square, 1.78, 16:9 or 1.5")
    parser.add_argument("--rotate", type=float, metavar="DEG", help="Clockwise rotation in degrees")
    parser.add_argument("--flip", choices=["horizontal", "vertical"], help="Mirror axis")
    parser.add_argument("--top", help="Top caption")
    parser.add_argument("--bottom", help="Bottom caption")
    parser.add_argument("--fill", help="Caption fill color (#rrggbb)")
    parser.add_argument("--stroke", help="Caption outline color (#rrggbb)")
    parser.add_argument("--format", help="Export format: jpeg, png or webp")
    parser.add_argument("--quality", type=float, help="Export quality 0.1-1.0")
    parser.add_argument("--settings", help="JSON settings file")
    parser.add_argument("--output", default=".", help="Output directory (default: current)")
    parser.add_argument("--list-tools", action="store_true", help="List editor tools and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _apply_resize(session: EditorSession, size: str, lock_aspect: bool) -> None:
    width, height = parse_size(size)
    if width <= 0 and height <= 0:
        raise InvalidDimensions(f"At least one of width or height must be positive, got {size!r}")
    session.set_lock_aspect(lock_aspect and (width == 0 or height == 0))
    if width:
        session.set_resize_width(width)
    if height:
        session.set_resize_height(height)
    session.apply_resize()


def run(args: argparse.Namespace) -> Path:
    """
    Run one edit pass and write the export.

    Returns:
        Path of the written file
    """
    settings = load_settings(args.settings) if args.settings else EditorSettings()
    session = EditorSession(settings=settings)
    session.load_file(args.input)

    if args.resize:
        _apply_resize(session, args.resize, not args.no_lock_aspect)
    if args.crop:
        session.apply_crop(args.crop)
    if args.rotate is not None:
        session.rotate_image(args.rotate)
    if args.flip:
        session.flip_image(args.flip)

    if args.top or args.bottom:
        session.select_tool(ToolType.MEME)
        session.set_meme_text(
            top=args.top,
            bottom=args.bottom,
            fill_color=args.fill,
            stroke_color=args.stroke,
        )
    else:
        session.select_tool(ToolType.CONVERT)

    if args.format:
        session.set_output_format(args.format)
    if args.quality is not None:
        session.set_quality(args.quality)

    result = session.download_image()

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / result.filename
    output_file.write_bytes(result.data)
    return output_file


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_tools:
        for info in get_tool_catalog():
            print(f"{info.tool.value:<10} {info.title} - {info.description}")
        return 0

    if not args.input:
        parser.print_usage()
        print("Error: an input image is required")
        return 1

    try:
        output_file = run(args)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except (EditorError, ValueError) as e:
        logger.debug("Edit failed", exc_info=True)
        print(f"Error: {e}")
        return 1

    print(f"Saved {output_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
