"""Error types raised by the conversion pipeline."""

from __future__ import annotations


class TypeartError(Exception):
    """Base class for all typeart errors."""


class PreconditionError(TypeartError, ValueError):
    """Input violates a precondition of the core pipeline.

    Raised for non-positive target dimensions, a source smaller than the
    target, an empty palette or a negative run-length threshold.
    """


class PaletteError(PreconditionError):
    """Palette table is empty or holds an invalid entry."""


class ConfigError(TypeartError, ValueError):
    """Configuration file could not be parsed."""
