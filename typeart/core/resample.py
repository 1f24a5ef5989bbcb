"""Box-filter downsampling from source to target resolution.

Each target cell (x, y) covers the half-open source patch

    [x*Sw//Tw, (x+1)*Sw//Tw) x [y*Sh//Th, (y+1)*Sh//Th)

and takes the truncated integer mean of the pixels inside it.
"""

from __future__ import annotations

import logging

import numpy as np

from typeart.core.errors import PreconditionError
from typeart.core.source import GraySource

log = logging.getLogger(__name__)


def patch_bounds(
    x: int,
    y: int,
    source_size: tuple[int, int],
    target_size: tuple[int, int],
) -> tuple[int, int, int, int]:
    """Source patch for target cell (x, y) as (x_begin, x_end, y_begin, y_end)."""
    sw, sh = source_size
    tw, th = target_size
    return (
        x * sw // tw,
        (x + 1) * sw // tw,
        y * sh // th,
        (y + 1) * sh // th,
    )


def check_dimensions(source_size: tuple[int, int], target_size: tuple[int, int]) -> None:
    """Raise PreconditionError unless every target cell gets a non-empty patch."""
    sw, sh = source_size
    tw, th = target_size
    if tw <= 0 or th <= 0:
        raise PreconditionError(
            f"Target dimensions must be positive, got {tw}x{th}"
        )
    if sw < tw or sh < th:
        raise PreconditionError(
            f"Source {sw}x{sh} is smaller than target {tw}x{th}; "
            "downsampling needs source >= target on both axes"
        )


def box_downsample(source: GraySource | np.ndarray, width: int, height: int) -> np.ndarray:
    """Downsample a grayscale source to (height, width) by patch averaging.

    Args:
        source: a GraySource or a 2-D uint8 array (height, width).
        width: target width in cells.
        height: target height in cells.

    Returns:
        New uint8 array of shape (height, width). The source is not modified.

    Raises:
        PreconditionError: target dimensions are not positive, or the source
            is smaller than the target on either axis.
    """
    if not isinstance(source, GraySource):
        source = GraySource(np.asarray(source))
    src = source.array

    sh, sw = src.shape
    check_dimensions((sw, sh), (width, height))
    log.debug("downsampling %dx%d -> %dx%d", sw, sh, width, height)

    out = np.empty((height, width), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            x0, x1, y0, y1 = patch_bounds(x, y, (sw, sh), (width, height))
            area = (x1 - x0) * (y1 - y0)
            if area == 0:
                raise PreconditionError(f"Empty source patch for target cell ({x}, {y})")
            total = int(src[y0:y1, x0:x1].sum(dtype=np.int64))
            out[y, x] = total // area
    return out
