from unittest.mock import patch

from models.schemas.structured_request import ParseResult
from services.parse_cache import CacheEntry, MemoryParseCache, fingerprint


def result(name="standard"):
    return ParseResult(success=True, confidence=0.9, strategy_name=name)


class TestFingerprint:
    def test_stable(self):
        assert fingerprint("text", "standard") == fingerprint("text", "standard")
        assert len(fingerprint("text")) == 64

    def test_strategy_changes_key(self):
        assert fingerprint("text", "standard") != fingerprint("text", "nlp")

    def test_none_is_empty(self):
        assert fingerprint(None) == fingerprint("")


class TestMemoryParseCache:
    def setup_method(self):
        self.cache = MemoryParseCache(max_entries=2, default_ttl=60)

    def test_get_set(self):
        self.cache.set("a", result())
        assert self.cache.get("a").strategy_name == "standard"
        assert self.cache.get("b") is None
        assert self.cache.hits == 1
        assert self.cache.misses == 1

    def test_lru_eviction(self):
        self.cache.set("a", result("a"))
        self.cache.set("b", result("b"))
        self.cache.get("a")
        self.cache.set("c", result("c"))
        assert self.cache.has("a")
        assert not self.cache.has("b")
        assert self.cache.has("c")
        assert self.cache.evictions == 1

    def test_overwrite_does_not_evict(self):
        self.cache.set("a", result("a"))
        self.cache.set("b", result("b"))
        self.cache.set("a", result("a2"))
        assert len(self.cache) == 2
        assert self.cache.evictions == 0
        assert self.cache.get("a").strategy_name == "a2"

    def test_ttl_expiry(self):
        with patch("services.parse_cache.time.monotonic", return_value=1000.0):
            self.cache.set("a", result())
        with patch("services.parse_cache.time.monotonic", return_value=1030.0):
            assert self.cache.get("a") is not None
        with patch("services.parse_cache.time.monotonic", return_value=1061.0):
            assert not self.cache.has("a")
            assert self.cache.get("a") is None
        assert self.cache.expirations == 1
        assert len(self.cache) == 0

    def test_per_entry_ttl(self):
        with patch("services.parse_cache.time.monotonic", return_value=0.0):
            self.cache.set("a", result(), ttl_seconds=5)
        with patch("services.parse_cache.time.monotonic", return_value=10.0):
            assert self.cache.get("a") is None

    def test_no_ttl(self):
        cache = MemoryParseCache(default_ttl=None)
        with patch("services.parse_cache.time.monotonic", return_value=0.0):
            cache.set("a", result())
        with patch("services.parse_cache.time.monotonic", return_value=10 ** 9):
            assert cache.get("a") is not None

    def test_delete_and_clear(self):
        self.cache.set("a", result())
        assert self.cache.delete("a") is True
        assert self.cache.delete("a") is False
        self.cache.set("b", result())
        self.cache.clear()
        assert len(self.cache) == 0

    def test_stats(self):
        self.cache.set("a", result())
        self.cache.get("a")
        self.cache.get("missing")
        stats = self.cache.stats()
        assert stats == {
            "entries": 1,
            "max_entries": 2,
            "hits": 1,
            "misses": 1,
            "evictions": 0,
            "expirations": 0,
            "writes": 1,
            "hit_rate": 0.5,
        }

    def test_hit_rate_empty(self):
        assert self.cache.hit_rate() == 0.0


def test_cache_entry_expiry():
    entry = CacheEntry(value=result(), created_at=100.0, ttl_seconds=10)
    assert not entry.is_expired(110.0)
    assert entry.is_expired(110.5)
