"""Unit tests for ImageCache."""

from __future__ import annotations

import pytest

from allergen_finder.services.images import CachedImage, ImageCache


pytestmark = pytest.mark.unit


class TestImageCache:
    """Tests for the FIFO image cache."""

    def test_rejects_zero_capacity(self) -> None:
        """Should require a capacity of at least one."""
        with pytest.raises(ValueError, match="capacity"):
            ImageCache(0)

    def test_miss_returns_none(self) -> None:
        """Should return None for unknown keys."""
        assert ImageCache(2).get("https://a.example") is None

    def test_negative_result_is_cached(self) -> None:
        """Should distinguish a cached None from a miss."""
        cache = ImageCache(2)

        cache.put("https://a.example", None)

        assert cache.get("https://a.example") == CachedImage(None)
        assert "https://a.example" in cache

    def test_evicts_first_inserted_at_capacity(self) -> None:
        """Should evict exactly the oldest key on the insert past capacity."""
        cache = ImageCache(3)
        for key in ("a", "b", "c"):
            cache.put(key, f"https://img.example/{key}.jpg")

        cache.put("d", "https://img.example/d.jpg")

        assert len(cache) == 3
        assert "a" not in cache
        assert all(key in cache for key in ("b", "c", "d"))

    def test_reads_do_not_refresh_position(self) -> None:
        """Should evict by insertion order even after a recent read."""
        cache = ImageCache(2)
        cache.put("a", "https://img.example/a.jpg")
        cache.put("b", "https://img.example/b.jpg")

        assert cache.get("a") is not None
        cache.put("c", "https://img.example/c.jpg")

        assert "a" not in cache
        assert "b" in cache

    def test_overwrite_keeps_position(self) -> None:
        """Should keep the original insertion slot when overwriting."""
        cache = ImageCache(2)
        cache.put("a", None)
        cache.put("b", None)

        cache.put("a", "https://img.example/a.jpg")
        cache.put("c", None)

        assert "a" not in cache
        assert len(cache) == 2

    def test_clear(self) -> None:
        """Should drop every entry."""
        cache = ImageCache(2)
        cache.put("a", None)

        cache.clear()

        assert len(cache) == 0
        assert cache.capacity == 2
