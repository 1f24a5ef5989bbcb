"""Floyd-Steinberg error diffusion onto a glyph palette."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from typeart.core.errors import PreconditionError
from typeart.core.palette import Palette

log = logging.getLogger(__name__)


class DiffusionMode(str, Enum):
    # Reproduces the original tool: the 1/16 share lands on (x, y+1) a second
    # time and the 3/16 share at x = 0 lands on column 0.
    COMPAT = "compat"
    # Textbook targets: 1/16 to (x+1, y+1), 3/16 skipped at x = 0.
    CANONICAL = "canonical"


@dataclass
class DitherResult:
    """Glyph rows plus the quantized raster they were chosen from."""

    lines: list[str]
    raster: np.ndarray

    @property
    def width(self) -> int:
        return self.raster.shape[1]

    @property
    def height(self) -> int:
        return self.raster.shape[0]


def trunc_div(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero (-7 // 16 gives 0, not -1)."""
    q = abs(numerator) // denominator
    return q if numerator >= 0 else -q


def saturating_add(value: int, delta: int) -> int:
    """Add delta to a brightness, clamping to [0, 255]."""
    return max(0, min(255, value + delta))


def _targets(x: int, y: int, mode: DiffusionMode) -> list[tuple[int, int, int]]:
    """(dx, dy, weight/16) diffusion targets relative to (x, y), in apply order."""
    if mode == DiffusionMode.COMPAT:
        # x - 1 saturates at column 0
        return [(1, 0, 7), (-1 if x > 0 else 0, 1, 3), (0, 1, 5), (0, 1, 1)]
    targets = [(1, 0, 7)]
    if x > 0:
        targets.append((-1, 1, 3))
    targets.extend([(0, 1, 5), (1, 1, 1)])
    return targets


def floyd_steinberg(
    raster: np.ndarray,
    palette: Palette,
    mode: DiffusionMode = DiffusionMode.COMPAT,
) -> DitherResult:
    """Quantize a raster to palette brightnesses with error diffusion.

    Cells are visited strictly row by row, left to right. Each cell is replaced
    by the brightness of its nearest palette entry and the signed residual is
    pushed into unvisited neighbors with truncating integer weights and
    saturating adds. Out-of-bounds targets are skipped.

    Args:
        raster: 2-D uint8 array (height, width). Modified in place.
        palette: glyph table used for quantization.
        mode: which neighbor set receives the residual.

    Returns:
        DitherResult whose raster is the same array object that was passed in.
    """
    if raster.ndim != 2:
        raise PreconditionError(f"Raster must be 2-D, got shape {raster.shape}")
    if raster.dtype != np.uint8:
        raise PreconditionError(f"Raster must be uint8, got {raster.dtype}")

    h, w = raster.shape
    log.debug("dithering %dx%d onto %d glyphs (%s)", w, h, len(palette), mode.value)

    lines: list[str] = []
    for y in range(h):
        row: list[str] = []
        for x in range(w):
            value = int(raster[y, x])
            entry = palette.nearest(value)
            row.append(entry.glyph)
            raster[y, x] = entry.brightness
            error = value - entry.brightness
            if error == 0:
                continue

            for dx, dy, weight in _targets(x, y, mode):
                tx, ty = x + dx, y + dy
                if tx >= w or ty >= h:
                    continue
                raster[ty, tx] = saturating_add(
                    int(raster[ty, tx]), trunc_div(error * weight, 16)
                )
        lines.append("".join(row))

    return DitherResult(lines=lines, raster=raster)
