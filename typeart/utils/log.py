"""Logging setup for the command-line entry points."""

from __future__ import annotations

import logging
import sys

LOG = logging.getLogger("typeart")


def setup_logging(debug: bool = False) -> None:
    """Send typeart log records to stderr.

    WARNING and above by default, everything with debug=True.
    """
    level = logging.DEBUG if debug else logging.WARNING
    LOG.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    LOG.handlers[:] = [handler]
    LOG.propagate = False
