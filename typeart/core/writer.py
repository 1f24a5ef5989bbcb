"""Save conversion output: preview raster, text transcript, typed page.

The preview is the quantized raster as a grayscale image. The page render
draws the glyph grid in a monospace font, black on white, as it would come
off the typewriter.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from typeart.core.pipeline import ConversionResult

log = logging.getLogger(__name__)

# Monospace font size and metrics
DEFAULT_FONT_SIZE = 14
CHAR_WIDTH_RATIO = 0.6  # Approximate char width / font size for monospace

PAPER = 255
INK = 0


def _get_font(size: int = DEFAULT_FONT_SIZE) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Get a monospace font for rendering."""
    for name in [
        "DejaVuSansMono.ttf",
        "Menlo.ttc",
        "Consolas.ttf",
        "CourierNew.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
        "/System/Library/Fonts/Menlo.ttc",
    ]:
        try:
            return ImageFont.truetype(name, size)
        except (IOError, OSError):
            continue
    return ImageFont.load_default()


def preview_image(raster: np.ndarray) -> Image.Image:
    """Wrap a quantized uint8 raster as a grayscale PIL image."""
    if raster.ndim != 2 or raster.dtype != np.uint8:
        raise ValueError(
            f"Preview raster must be 2-D uint8, got {raster.dtype} {raster.shape}"
        )
    return Image.fromarray(raster)


def save_preview(raster: np.ndarray, output_path: Path) -> None:
    """Save the quantized raster; format follows the suffix, PNG if none."""
    output_path = Path(output_path)
    fmt = None if output_path.suffix else "PNG"
    preview_image(raster).save(str(output_path), format=fmt)
    log.debug("wrote preview %s", output_path)


def save_transcript(
    result: ConversionResult,
    output_path: Path,
    include_raw: bool = False,
) -> None:
    """Write the run-length transcript, a blank line after each row."""
    Path(output_path).write_text(result.transcript(include_raw), encoding="utf-8")
    log.debug("wrote transcript %s", output_path)


def render_page(
    lines: list[str],
    font_size: int = DEFAULT_FONT_SIZE,
    margin: int = 0,
) -> Image.Image:
    """Render glyph rows to a grayscale image, ink on paper.

    Args:
        lines: glyph rows.
        font_size: pixel size for the monospace font.
        margin: blank border in pixels on every side.

    Returns:
        PIL Image (mode "L") with the rendered text.
    """
    font = _get_font(font_size)

    char_w = int(font_size * CHAR_WIDTH_RATIO)
    char_h = font_size + 2
    max_line_len = max((len(line) for line in lines), default=0)

    img_w = max(max_line_len * char_w, 1) + 2 * margin
    img_h = max(len(lines) * char_h, 1) + 2 * margin

    img = Image.new("L", (img_w, img_h), PAPER)
    draw = ImageDraw.Draw(img)
    for row_idx, line in enumerate(lines):
        y = margin + row_idx * char_h
        # Char by char so every glyph lands on the fixed typewriter pitch
        for col_idx, ch in enumerate(line):
            if ch != " ":
                draw.text((margin + col_idx * char_w, y), ch, fill=INK, font=font)
    return img


def save_page(
    lines: list[str],
    output_path: Path,
    font_size: int = DEFAULT_FONT_SIZE,
) -> None:
    render_page(lines, font_size).save(str(output_path))
    log.debug("wrote page render %s", output_path)


def save_outputs(
    result: ConversionResult,
    preview_path: Path | None = None,
    transcript_path: Path | None = None,
    page_path: Path | None = None,
    font_size: int = DEFAULT_FONT_SIZE,
    include_raw: bool = False,
) -> list[Path]:
    """Save whichever outputs were requested. Returns the paths written."""
    written: list[Path] = []
    if preview_path is not None:
        save_preview(result.raster, preview_path)
        written.append(Path(preview_path))
    if transcript_path is not None:
        save_transcript(result, transcript_path, include_raw)
        written.append(Path(transcript_path))
    if page_path is not None:
        save_page(result.lines, page_path, font_size)
        written.append(Path(page_path))
    return written
