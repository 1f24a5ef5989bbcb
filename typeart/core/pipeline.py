"""Image-to-typewriter conversion pipeline.

Downsample → quantize with error diffusion → run-length encode.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

import numpy as np

from typeart.core.config import validate_settings
from typeart.core.dither import DiffusionMode, floyd_steinberg
from typeart.core.palette import Palette, PaletteName, get_palette
from typeart.core.resample import box_downsample, check_dimensions
from typeart.core.rle import DEFAULT_THRESHOLD, encode_grid
from typeart.core.source import GraySource

log = logging.getLogger(__name__)

# Target size used by the original tool when no config is given
DEFAULT_WIDTH = 100
DEFAULT_HEIGHT = 100


@dataclass(frozen=True)
class Settings:
    """Parameters that affect conversion output."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    # Preset name, or a caller-built table used as-is
    palette: PaletteName | Palette = PaletteName.LEVELS
    glyphs: str | None = None  # custom light → dark ramp laid out like the preset
    threshold: int = DEFAULT_THRESHOLD
    diffusion: DiffusionMode = DiffusionMode.COMPAT

    def __post_init__(self) -> None:
        if not isinstance(self.palette, Palette):
            object.__setattr__(self, "palette", PaletteName(self.palette))
        object.__setattr__(self, "diffusion", DiffusionMode(self.diffusion))

    def resolve_palette(self) -> Palette:
        if isinstance(self.palette, Palette):
            return self.palette
        if self.glyphs:
            return Palette.from_glyphs(self.glyphs, self.palette)
        return get_palette(self.palette)

    @property
    def palette_label(self) -> str:
        if isinstance(self.palette, Palette):
            return self.palette.name
        return self.palette.value

    def _palette_key(self) -> str:
        if isinstance(self.palette, Palette):
            entries = ",".join(f"{e.glyph!r}={e.brightness}" for e in self.palette.entries)
            return f"table[{entries}]"
        return self.palette.value

    def hash(self) -> str:
        """Deterministic hash for cache keying."""
        data = (
            f"{self.width}:{self.height}:{self._palette_key()}:{self.glyphs}:"
            f"{self.threshold}:{self.diffusion.value}"
        )
        return hashlib.md5(data.encode()).hexdigest()[:12]


@dataclass
class ConversionResult:
    """Output of one conversion."""

    lines: list[str]  # Glyph grid, one string per row
    encoded: list[str]  # Run-length encoded rows
    raster: np.ndarray  # Quantized preview raster (height, width) uint8
    width: int
    height: int

    def text(self) -> str:
        return "\n".join(self.lines)

    def transcript(self, include_raw: bool = False) -> str:
        """Encoded rows, each followed by a blank separator line."""
        parts: list[str] = []
        for raw, enc in zip(self.lines, self.encoded):
            if include_raw:
                parts.append(raw)
            parts.append(enc)
            parts.append("")
        return "\n".join(parts) + "\n" if parts else ""


def convert(source: GraySource | np.ndarray, settings: Settings) -> ConversionResult:
    """Run the full pipeline on a grayscale source.

    Raises:
        PreconditionError: bad dimensions, palette or threshold. All checks
            run before any work is done.
    """
    if not isinstance(source, GraySource):
        source = GraySource(np.asarray(source))

    validate_settings(settings)
    palette = settings.resolve_palette()
    check_dimensions(source.dimensions(), (settings.width, settings.height))

    raster = box_downsample(source, settings.width, settings.height)
    dithered = floyd_steinberg(raster, palette, settings.diffusion)
    encoded = encode_grid(dithered.lines, settings.threshold)
    log.debug("converted %r with palette %s", source, palette.name)

    return ConversionResult(
        lines=dithered.lines,
        encoded=encoded,
        raster=dithered.raster,
        width=settings.width,
        height=settings.height,
    )
