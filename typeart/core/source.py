"""Grayscale source raster accessor."""

from __future__ import annotations

import numpy as np
from PIL import Image

from typeart.core.errors import PreconditionError


class GraySource:
    """Read-only view of a single-channel 8-bit source image.

    Wraps a (height, width) uint8 array. Values are 0 = black, 255 = white.
    """

    def __init__(self, array: np.ndarray) -> None:
        if array.ndim != 2:
            raise PreconditionError(
                f"Source raster must be 2-D, got shape {array.shape}"
            )
        if array.size == 0:
            raise PreconditionError("Source raster is empty")
        if array.dtype != np.uint8:
            if array.min() < 0 or array.max() > 255:
                raise PreconditionError("Source samples must lie in 0-255")
            array = array.astype(np.uint8)
        # Read-only view; the caller's array keeps its own flags
        self._array = array.view()
        self._array.setflags(write=False)

    @classmethod
    def from_image(cls, img: Image.Image) -> GraySource:
        """Build a source from a PIL image, converting to grayscale ("L")."""
        if img.mode != "L":
            img = img.convert("L")
        return cls(np.array(img, dtype=np.uint8))

    def dimensions(self) -> tuple[int, int]:
        """Return (width, height)."""
        h, w = self._array.shape
        return w, h

    def get_pixel(self, x: int, y: int) -> int:
        return int(self._array[y, x])

    @property
    def array(self) -> np.ndarray:
        return self._array

    def __repr__(self) -> str:
        w, h = self.dimensions()
        return f"GraySource({w}x{h})"
