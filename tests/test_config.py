"""Tests for the dimensions config file and settings validation."""

import pytest

from typeart.core.config import parse_dimensions, read_dimensions, validate_settings
from typeart.core.errors import ConfigError, PreconditionError
from typeart.core.pipeline import Settings


class TestParseDimensions:
    def test_basic(self):
        assert parse_dimensions("80\n40\n") == (80, 40)

    def test_whitespace(self):
        assert parse_dimensions("  80 \r\n\t40\n\n\n") == (80, 40)

    def test_non_numeric(self):
        with pytest.raises(ConfigError, match=r"dims\.txt:1: width"):
            parse_dimensions("wide\n40\n", "dims.txt")

    def test_non_numeric_height(self):
        with pytest.raises(ConfigError, match=r":2: height"):
            parse_dimensions("80\ntall\n")

    def test_missing_line(self):
        with pytest.raises(ConfigError, match="expected 2 lines"):
            parse_dimensions("80\n")

    def test_too_many_lines(self):
        with pytest.raises(ConfigError, match="expected 2 lines"):
            parse_dimensions("80\n40\n20\n")

    def test_non_positive(self):
        with pytest.raises(ConfigError, match="positive"):
            parse_dimensions("0\n40\n")


class TestReadDimensions:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "dims.txt"
        path.write_text("64\n32\n")
        assert read_dimensions(path) == (64, 32)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            read_dimensions(tmp_path / "nope.txt")

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "dims.txt"
        path.write_bytes(b"\xff\xfe\n")
        with pytest.raises(ConfigError, match="not UTF-8") as exc:
            read_dimensions(path)
        assert str(path) in str(exc.value)

    def test_directory(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config file"):
            read_dimensions(tmp_path)


class TestValidateSettings:
    def test_defaults_valid(self):
        validate_settings(Settings())

    def test_bad_height(self):
        with pytest.raises(PreconditionError):
            validate_settings(Settings(height=-3))

    def test_bad_threshold(self):
        with pytest.raises(PreconditionError):
            validate_settings(Settings(threshold=-1))
