"""Tests for glyph palettes and nearest-brightness lookup."""

import pytest

from typeart.core.errors import PaletteError
from typeart.core.palette import (
    BAND_GLYPHS,
    LEVEL_GLYPHS,
    PALETTES,
    Palette,
    PaletteEntry,
    PaletteName,
    band_index,
    get_palette,
)


class TestPresets:
    def test_levels_brightness(self):
        pal = PALETTES[PaletteName.LEVELS]
        assert [e.brightness for e in pal.entries] == [255, 219, 182, 146, 109, 73, 36, 0]
        assert pal.glyphs == LEVEL_GLYPHS

    def test_bands_brightness(self):
        pal = PALETTES[PaletteName.BANDS]
        assert [e.brightness for e in pal.entries] == [240, 208, 176, 144, 112, 80, 48, 16]
        assert pal.glyphs == BAND_GLYPHS

    def test_bands_match_band_index(self):
        """nearest() reproduces (255 - value) // 32 for every brightness."""
        pal = PALETTES[PaletteName.BANDS]
        for value in range(256):
            entry = pal.nearest(value)
            assert pal.entries.index(entry) == band_index(value), value

    def test_get_palette_by_string(self):
        assert get_palette("levels") is PALETTES[PaletteName.LEVELS]
        assert get_palette(PaletteName.BANDS) is PALETTES[PaletteName.BANDS]

    def test_get_palette_unknown(self):
        with pytest.raises(PaletteError, match="Unknown"):
            get_palette("sepia")


class TestNearest:
    def test_tie_goes_to_first_entry(self):
        """237 is 18 away from both 255 and 219; 255 is declared first."""
        pal = PALETTES[PaletteName.LEVELS]
        assert pal.nearest(237).brightness == 255

    def test_tie_order_dependent(self):
        a = PaletteEntry("a", 10)
        b = PaletteEntry("b", 20)
        assert Palette("ab", (a, b)).nearest(15) is a
        assert Palette("ba", (b, a)).nearest(15) is b

    def test_mid_gray(self):
        pal = PALETTES[PaletteName.LEVELS]
        # 146 is 18 away, 109 is 19 away
        entry = pal.nearest(128)
        assert entry.brightness == 146
        assert entry.glyph == "-"

    def test_total(self):
        pal = PALETTES[PaletteName.LEVELS]
        brightnesses = {e.brightness for e in pal.entries}
        for value in range(256):
            assert pal.nearest(value).brightness in brightnesses

    def test_out_of_range_values(self):
        """Diffused intermediates may leave 0-255; lookup still answers."""
        pal = PALETTES[PaletteName.LEVELS]
        assert pal.nearest(-40).brightness == 0
        assert pal.nearest(400).brightness == 255

    def test_exact_hits(self):
        pal = PALETTES[PaletteName.LEVELS]
        for entry in pal.entries:
            assert pal.nearest(entry.brightness) is entry


class TestConstruction:
    def test_empty_palette(self):
        with pytest.raises(PaletteError, match="no entries"):
            Palette("empty", ())

    def test_multi_char_glyph(self):
        with pytest.raises(PaletteError, match="single printable"):
            Palette("bad", (PaletteEntry("ab", 10),))

    def test_unprintable_glyph(self):
        with pytest.raises(PaletteError):
            Palette("bad", (PaletteEntry("\n", 10),))

    def test_brightness_out_of_range(self):
        with pytest.raises(PaletteError, match="0-255"):
            Palette("bad", (PaletteEntry("x", 256),))

    def test_evenly_spaced_single(self):
        pal = Palette.evenly_spaced("one", "#")
        assert pal.nearest(0).glyph == "#"
        assert len(pal) == 1

    def test_evenly_spaced_two(self):
        pal = Palette.evenly_spaced("two", " #")
        assert [e.brightness for e in pal.entries] == [255, 0]

    def test_evenly_spaced_empty(self):
        with pytest.raises(PaletteError):
            Palette.evenly_spaced("none", "")

    def test_banded_needs_divisor_of_128(self):
        with pytest.raises(PaletteError, match="dividing 128"):
            Palette.banded("three", "abc")

    def test_banded_four(self):
        pal = Palette.banded("four", " .:#")
        for value in range(256):
            assert pal.entries.index(pal.nearest(value)) == band_index(value, 4)

    def test_from_glyphs_kind(self):
        levels = Palette.from_glyphs(" .:#")
        bands = Palette.from_glyphs(" .:#", PaletteName.BANDS)
        assert [e.brightness for e in levels.entries] == [255, 170, 85, 0]
        assert [e.brightness for e in bands.entries] == [224, 160, 96, 32]
