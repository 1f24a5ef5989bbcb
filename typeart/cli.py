"""Command-line interface for typeart.

Supports both interactive TUI mode and headless/JSON mode for scripting.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from typeart.core.dither import DiffusionMode
from typeart.core.palette import PaletteName
from typeart.core.pipeline import DEFAULT_HEIGHT, DEFAULT_WIDTH
from typeart.core.rle import DEFAULT_THRESHOLD
from typeart.core.writer import DEFAULT_FONT_SIZE

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typeart",
        description="Convert a grayscale image to typewriter ASCII art.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Convert an image to glyph rows and a run-length transcript.",
    )
    convert.add_argument("input", help="Input image file path or HTTP(S) URL.")
    convert.add_argument(
        "--config",
        help="Two-line file with target width and height, one integer per line.",
    )
    convert.add_argument(
        "--width",
        type=int,
        default=None,
        help=f"Target width in characters (default: {DEFAULT_WIDTH}).",
    )
    convert.add_argument(
        "--height",
        type=int,
        default=None,
        help=f"Target height in characters (default: {DEFAULT_HEIGHT}).",
    )
    convert.add_argument(
        "--palette",
        choices=[p.value for p in PaletteName],
        default="levels",
        help="Palette layout (default: levels).",
    )
    convert.add_argument(
        "--glyphs",
        help="Custom glyph ramp, light to dark, laid out by --palette.",
    )
    convert.add_argument(
        "--threshold",
        type=int,
        default=DEFAULT_THRESHOLD,
        help=f"Runs longer than this are run-length encoded (default: {DEFAULT_THRESHOLD}).",
    )
    convert.add_argument(
        "--diffusion",
        choices=[d.value for d in DiffusionMode],
        default="compat",
        help="Error diffusion targets (default: compat).",
    )
    convert.add_argument("--preview", help="Write the dithered preview raster here (PNG).")
    convert.add_argument("--transcript", help="Write the run-length transcript here.")
    convert.add_argument("--page", help="Render the glyph grid as a typed page image.")
    convert.add_argument(
        "--font-size",
        type=int,
        default=DEFAULT_FONT_SIZE,
        help=f"Font size for the page render (default: {DEFAULT_FONT_SIZE}).",
    )
    convert.add_argument(
        "--raw",
        action="store_true",
        help="Include raw glyph rows in the transcript file.",
    )
    convert.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    convert.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging and show stack traces on error.",
    )

    return parser


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(args: argparse.Namespace, message: str, code: str) -> None:
    if args.debug:
        log.exception(message)
    if args.json:
        _json_error(message, code)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _resolve_dimensions(args: argparse.Namespace) -> tuple[int, int]:
    """Config file first, then explicit flags override each axis."""
    from typeart.core.config import read_dimensions

    width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT
    if args.config:
        width, height = read_dimensions(args.config)
    if args.width is not None:
        width = args.width
    if args.height is not None:
        height = args.height
    return width, height


def _print_rows(lines: list[str], encoded: list[str]) -> None:
    """Raw row, encoded row, blank line."""
    for raw, enc in zip(lines, encoded):
        print(raw)
        print(enc)
        print()


def _run_convert(args: argparse.Namespace) -> None:
    """Run the headless convert pipeline."""
    from typeart.core.errors import ConfigError, PreconditionError
    from typeart.core.pipeline import Settings, convert
    from typeart.core.reader import is_url, open_image
    from typeart.core.writer import save_outputs

    raw_input = args.input
    is_remote = is_url(raw_input)

    try:
        width, height = _resolve_dimensions(args)
    except ConfigError as e:
        _fail(args, str(e), "INVALID_CONFIG")

    if is_remote and not args.json:
        print(f"Downloading {raw_input}...", file=sys.stderr)

    try:
        source = open_image(raw_input)
    except FileNotFoundError as e:
        _fail(args, str(e), "FILE_NOT_FOUND")
    except (ValueError, OSError) as e:
        _fail(args, str(e), "DOWNLOAD_FAILED" if is_remote else "INVALID_INPUT")

    settings = Settings(
        width=width,
        height=height,
        palette=PaletteName(args.palette),
        glyphs=args.glyphs,
        threshold=args.threshold,
        diffusion=DiffusionMode(args.diffusion),
    )

    try:
        result = convert(source, settings)
    except PreconditionError as e:
        _fail(args, str(e), "PRECONDITION")

    try:
        written = save_outputs(
            result,
            preview_path=Path(args.preview) if args.preview else None,
            transcript_path=Path(args.transcript) if args.transcript else None,
            page_path=Path(args.page) if args.page else None,
            font_size=args.font_size,
            include_raw=args.raw,
        )
    except (OSError, ValueError) as e:
        _fail(args, str(e), "PROCESSING_ERROR")

    if not args.json:
        _print_rows(result.lines, result.encoded)
        for path in written:
            print(f"Saved to {path}", file=sys.stderr)
        return

    source_w, source_h = source.dimensions()
    output = {
        "status": "success",
        "input": raw_input,
        "settings": {
            "width": settings.width,
            "height": settings.height,
            "palette": settings.resolve_palette().name,
            "glyphs": settings.resolve_palette().glyphs,
            "threshold": settings.threshold,
            "diffusion": settings.diffusion.value,
        },
        "metadata": {
            "source_width": source_w,
            "source_height": source_h,
        },
        "lines": result.lines,
        "encoded": result.encoded,
        "outputs": [str(p) for p in written],
    }
    print(json.dumps(output, indent=2))


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Routing:
      typeart convert <image> [opts]  → headless conversion
      typeart <image>                 → launch TUI with image
      typeart                         → launch TUI (open dialog)
    """
    from typeart.utils.log import setup_logging

    raw_args = sys.argv[1:] if argv is None else argv
    if raw_args and raw_args[0] == "convert":
        parser = _build_parser()
        args = parser.parse_args(raw_args)
        setup_logging(args.debug)
        _run_convert(args)
    elif raw_args and raw_args[0] in ("-h", "--help"):
        parser = _build_parser()
        parser.parse_args(raw_args)
    elif raw_args and not raw_args[0].startswith("-"):
        # Positional arg = file path → TUI
        from typeart.app import run_app

        setup_logging()
        run_app(input_path=raw_args[0])
    else:
        from typeart.app import run_app

        setup_logging()
        run_app()
