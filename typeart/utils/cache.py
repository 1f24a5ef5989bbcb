"""LRU cache of conversion results keyed by settings hash."""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, TypeVar

T = TypeVar("T")


class ResultCache(Generic[T]):
    """Simple LRU cache for conversion results.

    Keys are Settings.hash() strings; the cache belongs to one loaded image
    and must be cleared when the image changes.
    """

    def __init__(self, max_size: int = 32) -> None:
        self._max_size = max_size
        self._cache: OrderedDict[str, T] = OrderedDict()

    def get(self, settings_hash: str) -> T | None:
        """Get a cached result, or None if not present."""
        if settings_hash in self._cache:
            self._cache.move_to_end(settings_hash)
            return self._cache[settings_hash]
        return None

    def put(self, settings_hash: str, value: T) -> None:
        if settings_hash in self._cache:
            self._cache.move_to_end(settings_hash)
        elif len(self._cache) >= self._max_size:
            self._cache.popitem(last=False)
        self._cache[settings_hash] = value

    def clear(self) -> None:
        self._cache.clear()

    @property
    def size(self) -> int:
        return len(self._cache)
