"""Tests for the conversion pipeline."""

import numpy as np
import pytest

from typeart.core.dither import DiffusionMode
from typeart.core.errors import PaletteError, PreconditionError
from typeart.core.palette import Palette, PaletteEntry, PaletteName
from typeart.core.pipeline import ConversionResult, Settings, convert
from typeart.core.source import GraySource


def _uniform(value: int, width: int = 4, height: int = 4) -> GraySource:
    return GraySource(np.full((height, width), value, dtype=np.uint8))


class TestSettings:
    def test_default_settings(self):
        s = Settings()
        assert s.width == 100
        assert s.height == 100
        assert s.palette == PaletteName.LEVELS
        assert s.threshold == 2
        assert s.diffusion == DiffusionMode.COMPAT

    def test_hash_deterministic(self):
        assert Settings().hash() == Settings().hash()

    def test_hash_changes_with_settings(self):
        base = Settings().hash()
        assert Settings(threshold=3).hash() != base
        assert Settings(diffusion=DiffusionMode.CANONICAL).hash() != base
        assert Settings(glyphs=" #").hash() != base

    def test_custom_glyphs_override_preset(self):
        pal = Settings(glyphs=" #").resolve_palette()
        assert pal.glyphs == " #"


class TestConvert:
    def test_uniform_end_to_end(self):
        result = convert(_uniform(128), Settings(width=2, height=2))
        assert isinstance(result, ConversionResult)
        assert result.lines == ["-=", "=-"]
        assert result.encoded == ["-=", "=-"]
        assert result.raster.tolist() == [[146, 109], [109, 146]]
        assert (result.width, result.height) == (2, 2)

    def test_runs_encoded(self):
        result = convert(_uniform(255, 8, 2), Settings(width=8, height=2))
        assert result.lines == [" " * 8] * 2
        assert result.encoded == ["(  8)"] * 2

    def test_accepts_array(self):
        result = convert(np.zeros((6, 6), dtype=np.uint8), Settings(width=3, height=3))
        assert result.lines == ["###"] * 3

    def test_bands_palette(self):
        result = convert(_uniform(0), Settings(width=4, height=4, palette=PaletteName.BANDS))
        assert result.lines == ["@@@@"] * 4
        # 0 quantizes to 16; pushed residual is clamped at 0, never wraps
        assert (result.raster == 16).all()

    def test_source_untouched(self):
        arr = np.full((4, 4), 128, dtype=np.uint8)
        convert(arr, Settings(width=2, height=2))
        assert (arr == 128).all()

    def test_source_smaller_than_target(self):
        with pytest.raises(PreconditionError, match="smaller"):
            convert(_uniform(128), Settings(width=5, height=2))

    def test_non_positive_dimensions(self):
        with pytest.raises(PreconditionError, match="positive"):
            convert(_uniform(128), Settings(width=0, height=2))

    def test_negative_threshold(self):
        with pytest.raises(PreconditionError, match="threshold"):
            convert(_uniform(128), Settings(width=2, height=2, threshold=-1))

    def test_empty_glyph_ramp(self):
        with pytest.raises(PreconditionError, match="empty"):
            convert(_uniform(128), Settings(width=2, height=2, glyphs=""))

    def test_bad_banded_ramp(self):
        with pytest.raises(PaletteError):
            convert(
                _uniform(128),
                Settings(width=2, height=2, palette=PaletteName.BANDS, glyphs="abc"),
            )


class TestConversionResult:
    def test_transcript_blank_separators(self):
        result = convert(_uniform(128), Settings(width=2, height=2))
        assert result.transcript() == "-=\n\n=-\n\n"

    def test_transcript_with_raw(self):
        result = convert(_uniform(128), Settings(width=2, height=2))
        assert result.transcript(include_raw=True) == "-=\n-=\n\n=-\n=-\n\n"

    def test_text(self):
        result = convert(_uniform(128), Settings(width=2, height=2))
        assert result.text() == "-=\n=-"


class TestPaletteTable:
    @staticmethod
    def _curve():
        return Palette("curve", (PaletteEntry(" ", 255), PaletteEntry("#", 200)))

    def test_table_used_as_is(self):
        settings = Settings(width=2, height=2, palette=self._curve())
        assert settings.resolve_palette() is settings.palette
        result = convert(np.full((4, 4), 220, dtype=np.uint8), settings)
        # 220 is 35 from 255 and 20 from 200
        assert result.lines[0][0] == "#"
        assert set(np.unique(result.raster).tolist()) <= {200, 255}
        assert settings.palette_label == "curve"

    def test_table_entries_in_hash(self):
        other = Palette("curve", (PaletteEntry(" ", 255), PaletteEntry("#", 190)))
        a = Settings(palette=self._curve())
        assert a.hash() == Settings(palette=self._curve()).hash()
        assert a.hash() != Settings(palette=other).hash()
        assert a.hash() != Settings().hash()

    def test_glyph_ramp_with_table_rejected(self):
        settings = Settings(width=2, height=2, palette=self._curve(), glyphs=" #")
        with pytest.raises(PreconditionError, match="palette table"):
            convert(_uniform(128), settings)


class TestSettingsCoercion:
    def test_palette_name_string(self):
        s = Settings(palette="bands")
        assert s.palette is PaletteName.BANDS
        assert s.hash() == Settings(palette=PaletteName.BANDS).hash()

    def test_diffusion_string(self):
        assert Settings(diffusion="canonical").diffusion is DiffusionMode.CANONICAL

    def test_unknown_palette_name(self):
        with pytest.raises(ValueError):
            Settings(palette="sepia")
