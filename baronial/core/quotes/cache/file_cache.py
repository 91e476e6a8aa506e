"""File-based JSON cache — one record per symbol, served while fresh."""
from __future__ import annotations

import asyncio
import os
import tempfile
from datetime import timedelta
from pathlib import Path

import structlog
from pydantic import ValidationError

from baronial.core.quotes.errors import CacheRecordError
from baronial.core.quotes.models import Quote, symbol_key, utc_now
from baronial.core.quotes.providers.base import QuoteSource

DEFAULT_TTL = timedelta(hours=24)

logger = structlog.get_logger()


class FileQuoteCache(QuoteSource):
    """Decorator that checks the on-disk record before hitting the passthrough source.

    A record that exists but cannot be decoded fails the request instead of
    being treated as a miss. Writes replace the record atomically within one
    process; concurrent writers across processes are last-write-wins.
    """

    def __init__(self, passthrough: QuoteSource, cache_dir: str, ttl: timedelta = DEFAULT_TTL):
        self.passthrough = passthrough
        self.ttl = ttl or DEFAULT_TTL
        self.dir = Path(cache_dir)
        self.dir.mkdir(parents=True, exist_ok=True)

    @property
    def name(self) -> str:
        return f"file({self.passthrough.name})"

    def path_for(self, symbol: str) -> Path:
        safe = symbol_key(symbol).replace("/", "_").replace("\\", "_")
        return self.dir / f"{safe}.json"

    def _read(self, path: Path) -> Quote | None:
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            raise CacheRecordError(path, str(exc)) from exc
        try:
            return Quote.from_json(raw)
        except ValidationError as exc:
            raise CacheRecordError(path, str(exc)) from exc

    def _write(self, path: Path, quote: Quote) -> None:
        fd, tmp = tempfile.mkstemp(dir=self.dir, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(quote.to_json())
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def read_quote(self, symbol: str) -> Quote | None:
        return await asyncio.to_thread(self._read, self.path_for(symbol))

    async def write_quote(self, quote: Quote) -> None:
        """Overwrite the record for quote.symbol unconditionally."""
        path = self.path_for(quote.symbol)
        try:
            await asyncio.to_thread(self._write, path, quote)
        except (OSError, ValueError) as exc:
            raise CacheRecordError(path, str(exc)) from exc

    async def quote(self, symbol: str) -> Quote:
        stale_at = utc_now() - self.ttl

        cached = await self.read_quote(symbol)
        if cached is not None and cached.is_fresh(stale_at):
            logger.info("cache.hit", layer="file", symbol=symbol)
            return cached

        logger.info("cache.miss", layer="file", symbol=symbol, stale=cached is not None)
        updated = await self.passthrough.quote(symbol)

        await self.write_quote(updated)
        logger.info("cache.stored", layer="file", symbol=symbol)
        return updated
