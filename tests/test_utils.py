"""Tests for the result cache and target sizing."""

from typeart.app import fit_target
from typeart.utils.cache import ResultCache


class TestResultCache:
    def test_get_missing(self):
        assert ResultCache().get("abc") is None

    def test_put_get(self):
        cache = ResultCache()
        cache.put("abc", 1)
        assert cache.get("abc") == 1
        assert cache.size == 1

    def test_evicts_least_recent(self):
        cache = ResultCache(max_size=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3

    def test_clear(self):
        cache = ResultCache()
        cache.put("a", 1)
        cache.clear()
        assert cache.size == 0


class TestFitTarget:
    def test_width_constrained(self):
        assert fit_target(400, 100, 80, 24) == (80, 10)

    def test_height_constrained(self):
        assert fit_target(100, 100, 80, 24) == (48, 24)

    def test_capped_at_image_size(self):
        """The box filter only downsamples, so never exceed the source."""
        assert fit_target(20, 10, 80, 24) == (20, 10)

    def test_tiny_pane(self):
        assert fit_target(300, 200, 0, -1) == (1, 1)
