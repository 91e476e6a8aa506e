"""In-memory LRU cache layer — thread-safe, fixed capacity."""
from __future__ import annotations

import threading
from collections import OrderedDict
from datetime import timedelta
from typing import Generic, Hashable, TypeVar

import structlog

from baronial.core.quotes.models import Quote, symbol_key, utc_now
from baronial.core.quotes.providers.base import QuoteSource

DEFAULT_TTL = timedelta(hours=24)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

logger = structlog.get_logger()


class LRUTable(Generic[K, V]):
    """Fixed-capacity map evicting the least-recently *accessed* key first."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"LRU capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._items: OrderedDict[K, V] = OrderedDict()

    def get(self, key: K) -> V | None:
        with self._lock:
            if key not in self._items:
                return None
            self._items.move_to_end(key)
            return self._items[key]

    def put(self, key: K, value: V) -> K | None:
        """Insert as most recently used. Returns the evicted key, if any."""
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            if len(self._items) > self.capacity:
                evicted, _ = self._items.popitem(last=False)
                return evicted
            return None

    def keys(self) -> list[K]:
        """Least recently used first."""
        with self._lock:
            return list(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class MemoryQuoteCache(QuoteSource):
    """Decorator serving fresh quotes from memory before asking the passthrough source."""

    def __init__(self, passthrough: QuoteSource, capacity: int, ttl: timedelta = DEFAULT_TTL):
        self.passthrough = passthrough
        self.ttl = ttl or DEFAULT_TTL
        self.table: LRUTable[str, Quote] = LRUTable(capacity)

    @property
    def name(self) -> str:
        return f"memory({self.passthrough.name})"

    async def quote(self, symbol: str) -> Quote:
        stale_at = utc_now() - self.ttl
        key = symbol_key(symbol)

        cached = self.table.get(key)
        if cached is not None and cached.is_fresh(stale_at):
            logger.info("cache.hit", layer="memory", symbol=symbol)
            return cached

        logger.info("cache.miss", layer="memory", symbol=symbol)
        result = await self.passthrough.quote(symbol)

        evicted = self.table.put(key, result)
        if evicted is not None:
            logger.info("cache.evicted", layer="memory", symbol=evicted)
        return result
