"""Quote layer — cache-first quote access.

Design: every lookup goes through QuoteStack.source, which is always
  memory → file → provider     (when a cache directory is configured)
  memory → provider            (otherwise)
Memory is checked first because it is cheapest, the file record is checked
before any network call, and a miss at every layer reaches the provider
exactly once. The stack is built once at startup and handed to the HTTP
layer explicitly.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import structlog

from baronial.core.config import Settings
from baronial.core.quotes.cache.file_cache import FileQuoteCache
from baronial.core.quotes.cache.memory_cache import MemoryQuoteCache
from baronial.core.quotes.errors import ConfigurationError
from baronial.core.quotes.providers.alphavantage import AlphaVantageProvider
from baronial.core.quotes.providers.base import QuoteSource
from baronial.core.quotes.providers.upstream import UpstreamProvider

logger = structlog.get_logger()


@dataclass(frozen=True)
class QuoteStack:
    source: QuoteSource
    provider: QuoteSource
    file_cache: FileQuoteCache | None = None


def select_provider(settings: Settings) -> QuoteSource:
    """Pick the single remote source. Checked in a fixed order; the last one set wins."""
    provider: QuoteSource | None = None

    if settings.avkey:
        provider = AlphaVantageProvider(api_key=settings.avkey)

    if settings.upstream:
        if provider is not None:
            logger.warning("provider.overridden", ignored=provider.name, upstream=settings.upstream)
        provider = UpstreamProvider(address=settings.upstream)

    if provider is None:
        raise ConfigurationError("No source of quotes configured.")

    logger.info("provider.selected", provider=provider.name)
    return provider


def build_quote_stack(settings: Settings) -> QuoteStack:
    provider = select_provider(settings)
    ttl = timedelta(hours=settings.cache_ttlhours)

    source: QuoteSource = provider
    file_cache = None
    if settings.cachepath:
        file_cache = FileQuoteCache(provider, settings.cachepath, ttl=ttl)
        logger.info("cache.configured", layer="file", path=settings.cachepath, ttl_hours=settings.cache_ttlhours)
        source = file_cache

    source = MemoryQuoteCache(source, settings.memcache_limit, ttl=ttl)
    logger.info("cache.configured", layer="memory", capacity=settings.memcache_limit, ttl_hours=settings.cache_ttlhours)

    return QuoteStack(source=source, provider=provider, file_cache=file_cache)
