"""Glyph palettes for brightness quantization.

A palette is an ordered table of (glyph, brightness) entries. Lookup picks the
entry whose brightness is closest to the input; ties go to the entry declared
first. Presets are declared light to dark (high brightness -> low brightness)
to match ink density on paper.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from typeart.core.errors import PaletteError


class PaletteName(str, Enum):
    LEVELS = "levels"
    BANDS = "bands"


# Ordered light → dark
LEVEL_GLYPHS = " .:-=+*#"
BAND_GLYPHS = " .,:;ox@"


@dataclass(frozen=True)
class PaletteEntry:
    glyph: str
    brightness: int


@dataclass(frozen=True)
class Palette:
    name: str
    entries: tuple[PaletteEntry, ...]

    def __post_init__(self) -> None:
        if not self.entries:
            raise PaletteError(f"Palette {self.name!r} has no entries")
        for entry in self.entries:
            if len(entry.glyph) != 1 or not entry.glyph.isprintable():
                raise PaletteError(
                    f"Palette {self.name!r}: glyph {entry.glyph!r} "
                    "must be a single printable character"
                )
            if not 0 <= entry.brightness <= 255:
                raise PaletteError(
                    f"Palette {self.name!r}: brightness {entry.brightness} "
                    f"for {entry.glyph!r} is outside 0-255"
                )

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def glyphs(self) -> str:
        return "".join(e.glyph for e in self.entries)

    def nearest(self, value: int) -> PaletteEntry:
        """Return the entry with brightness closest to value.

        Single left-to-right scan with a strict less-than comparison, so on a
        tie the earlier-declared entry wins.
        """
        best = self.entries[0]
        best_dist = abs(value - best.brightness)
        for entry in self.entries[1:]:
            dist = abs(value - entry.brightness)
            if dist < best_dist:
                best = entry
                best_dist = dist
        return best

    @classmethod
    def evenly_spaced(cls, name: str, glyphs: str) -> Palette:
        """Spread glyphs (light → dark) evenly from 255 down to 0.

        Brightness for glyph i of n is 255*(n-1-i)/(n-1), rounded half up.
        Eight glyphs give 255, 219, 182, 146, 109, 73, 36, 0.
        """
        n = len(glyphs)
        if n == 0:
            raise PaletteError(f"Palette {name!r} has no glyphs")
        if n == 1:
            return cls(name, (PaletteEntry(glyphs, 255),))
        span = n - 1
        entries = tuple(
            PaletteEntry(g, (255 * (span - i) + span // 2) // span)
            for i, g in enumerate(glyphs)
        )
        return cls(name, entries)

    @classmethod
    def banded(cls, name: str, glyphs: str) -> Palette:
        """Equal-width bands over the inverted brightness axis.

        Glyph k (light → dark) covers every value with
        (255 - value) // band_width == k. Each entry sits in the middle of its
        band so that nearest() agrees with band_index() for all of 0-255.
        The glyph count must divide 128 (band width even).
        """
        n = len(glyphs)
        if n == 0:
            raise PaletteError(f"Palette {name!r} has no glyphs")
        if 128 % n != 0:
            raise PaletteError(
                f"Banded palette {name!r} needs a glyph count dividing 128, got {n}"
            )
        width = 256 // n
        entries = tuple(
            PaletteEntry(g, 256 - width * k - width // 2)
            for k, g in enumerate(glyphs)
        )
        return cls(name, entries)

    @classmethod
    def from_glyphs(cls, glyphs: str, kind: PaletteName = PaletteName.LEVELS) -> Palette:
        """Build a custom palette from a light → dark glyph ramp."""
        if kind == PaletteName.BANDS:
            return cls.banded("custom-bands", glyphs)
        return cls.evenly_spaced("custom-levels", glyphs)


def band_index(value: int, bands: int = 8) -> int:
    """Band of value on the inverted axis: (255 - value) // (256 // bands)."""
    return (255 - value) // (256 // bands)


PALETTES: dict[PaletteName, Palette] = {
    PaletteName.LEVELS: Palette.evenly_spaced(PaletteName.LEVELS.value, LEVEL_GLYPHS),
    PaletteName.BANDS: Palette.banded(PaletteName.BANDS.value, BAND_GLYPHS),
}


def get_palette(name: PaletteName | str) -> Palette:
    """Look up a preset palette by name."""
    try:
        return PALETTES[PaletteName(name)]
    except ValueError:
        raise PaletteError(f"Unknown palette: {name}") from None
