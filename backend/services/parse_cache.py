"""In-memory cache of parse results keyed by an input fingerprint.

LRU eviction once ``max_entries`` is reached, per-entry TTL, hit/miss counters.
"""

import hashlib
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Protocol

from models.schemas.structured_request import ParseResult

logger = logging.getLogger(__name__)


def fingerprint(text: str, strategy: str | None = None) -> str:
    """SHA-256 of the strategy name and the raw text."""
    payload = f"{strategy or ''}\x00{text or ''}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ParseCache(Protocol):
    def get(self, key: str) -> ParseResult | None: ...

    def set(self, key: str, value: ParseResult, ttl_seconds: int | None = None) -> None: ...

    def delete(self, key: str) -> bool: ...

    def clear(self) -> None: ...

    def has(self, key: str) -> bool: ...

    def stats(self) -> dict[str, Any]: ...


@dataclass
class CacheEntry:
    value: ParseResult
    created_at: float
    ttl_seconds: int | None = None
    access_count: int = 0

    def is_expired(self, now: float) -> bool:
        if self.ttl_seconds is None:
            return False
        return now - self.created_at > self.ttl_seconds


class MemoryParseCache:
    """Thread-safe LRU + TTL cache.

    Example:
        cache = MemoryParseCache(max_entries=100, default_ttl=600)
        key = fingerprint(text, "standard")
        cache.set(key, result)
        cache.get(key)
    """

    def __init__(self, max_entries: int = 1000, default_ttl: int | None = 3600):
        self.max_entries = max(1, max_entries)
        self.default_ttl = default_ttl
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.expirations = 0
        self.writes = 0

    def get(self, key: str) -> ParseResult | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if entry.is_expired(time.monotonic()):
                logger.debug("Cache entry expired: %s", key[:12])
                del self._entries[key]
                self.misses += 1
                self.expirations += 1
                return None
            self._entries.move_to_end(key)
            entry.access_count += 1
            self.hits += 1
            return entry.value

    def set(self, key: str, value: ParseResult, ttl_seconds: int | None = None) -> None:
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            while len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug("Cache entry evicted: %s", evicted[:12])
            self._entries[key] = CacheEntry(
                value=value,
                created_at=time.monotonic(),
                ttl_seconds=ttl_seconds if ttl_seconds is not None else self.default_ttl,
            )
            self.writes += 1

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Parse cache cleared (%d entries)", count)

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(time.monotonic())

    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "max_entries": self.max_entries,
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
                "expirations": self.expirations,
                "writes": self.writes,
                "hit_rate": round(self.hit_rate(), 4),
            }

    def __len__(self) -> int:
        return len(self._entries)
