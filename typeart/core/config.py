"""Target-dimension config file and settings validation.

The dimensions file is plain text, two lines, one integer per line:

    80
    40

first line width, second line height.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from typeart.core.errors import ConfigError, PreconditionError
from typeart.core.palette import PaletteName

if TYPE_CHECKING:
    from typeart.core.pipeline import Settings


def parse_dimensions(text: str, source: str = "<config>") -> tuple[int, int]:
    """Parse "width\\nheight" text into a (width, height) tuple."""
    lines = [line.strip() for line in text.splitlines()]
    while lines and not lines[-1]:
        lines.pop()
    if len(lines) != 2:
        raise ConfigError(
            f"{source}: expected 2 lines (width, height), got {len(lines)}"
        )

    values = []
    for lineno, (label, raw) in enumerate(zip(("width", "height"), lines), start=1):
        try:
            value = int(raw)
        except ValueError:
            raise ConfigError(
                f"{source}:{lineno}: {label} is not an integer: {raw!r}"
            ) from None
        if value <= 0:
            raise ConfigError(f"{source}:{lineno}: {label} must be positive, got {value}")
        values.append(value)
    return values[0], values[1]


def read_dimensions(path: str | Path) -> tuple[int, int]:
    """Read target (width, height) from a two-line config file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config file is not UTF-8 text: {path}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e.strerror or e}") from e
    return parse_dimensions(text, str(path))


def validate_settings(settings: Settings) -> None:
    """Reject settings the core cannot run with."""
    if settings.width <= 0 or settings.height <= 0:
        raise PreconditionError(
            f"Target dimensions must be positive, got {settings.width}x{settings.height}"
        )
    if settings.threshold < 0:
        raise PreconditionError(
            f"Run-length threshold must be >= 0, got {settings.threshold}"
        )
    if settings.glyphs is not None and not settings.glyphs:
        raise PreconditionError("Custom glyph ramp is empty")
    if settings.glyphs and not isinstance(settings.palette, PaletteName):
        raise PreconditionError("A glyph ramp cannot be combined with a palette table")
