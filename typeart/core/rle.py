"""Run-length encoding of glyph rows for typewriter transcription.

Runs longer than the threshold become explicit (glyph, count) tokens; shorter
runs stay as literal text so the transcript is still readable at a glance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

from typeart.core.errors import PreconditionError

DEFAULT_THRESHOLD = 2


@dataclass(frozen=True)
class RunToken:
    glyph: str
    count: int

    def __str__(self) -> str:
        return f"({self.glyph} {self.count})"


Item = Union[str, RunToken]


def iter_runs(row: Sequence[str]) -> Iterator[tuple[str, int]]:
    """Yield (glyph, count) for each maximal run of identical glyphs."""
    current: str | None = None
    count = 0
    for glyph in row:
        if glyph == current:
            count += 1
            continue
        if current is not None:
            yield current, count
        current, count = glyph, 1
    if current is not None:
        yield current, count


def encode_row(row: Sequence[str], threshold: int = DEFAULT_THRESHOLD) -> list[Item]:
    """Encode one row into literal spans and RunTokens.

    A run of length > threshold becomes a RunToken; anything shorter is
    emitted as repeated literal glyphs. Consecutive literal runs are merged
    into a single span.
    """
    if threshold < 0:
        raise PreconditionError(f"Run-length threshold must be >= 0, got {threshold}")

    items: list[Item] = []
    for glyph, count in iter_runs(row):
        if count > threshold:
            items.append(RunToken(glyph, count))
        elif items and isinstance(items[-1], str):
            items[-1] += glyph * count
        else:
            items.append(glyph * count)
    return items


def decode_tokens(items: Iterable[Item]) -> str:
    """Expand encoded items back into the original glyph row."""
    parts: list[str] = []
    for item in items:
        if isinstance(item, RunToken):
            parts.append(item.glyph * item.count)
        else:
            parts.append(item)
    return "".join(parts)


def format_tokens(items: Iterable[Item]) -> str:
    """Join items with single spaces: "aaabbccccd" -> "(a 3) bb (c 4) d"."""
    return " ".join(str(item) for item in items)


def encode_grid(lines: Iterable[str], threshold: int = DEFAULT_THRESHOLD) -> list[str]:
    """Encode and format every row of a glyph grid."""
    return [format_tokens(encode_row(line, threshold)) for line in lines]
