"""Upstream provider — another instance of this service, speaking the normalized Quote JSON."""
from __future__ import annotations

import aiohttp
import structlog
from pydantic import ValidationError

from baronial.core.quotes.errors import (
    QuoteDecodeError,
    QuoteTransportError,
    SymbolNotFound,
    UpstreamStatusError,
)
from baronial.core.quotes.models import Quote
from baronial.core.quotes.providers.base import QuoteSource

QUOTE_PATH = "/api/v0/quote"

logger = structlog.get_logger()


class UpstreamProvider(QuoteSource):

    def __init__(self, address: str):
        # host:port, no scheme
        self._address = address

    @property
    def name(self) -> str:
        return f"upstream({self._address})"

    @property
    def url(self) -> str:
        return f"http://{self._address}{QUOTE_PATH}"

    async def _fetch(self, symbol: str) -> tuple[int, bytes]:
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(self.url, params={"symbol": symbol}) as resp:
                    return resp.status, await resp.read()
        except aiohttp.ClientError as exc:
            raise QuoteTransportError(str(exc)) from exc

    async def quote(self, symbol: str) -> Quote:
        logger.info("provider.request", provider=self.name, symbol=symbol)
        status, body = await self._fetch(symbol)

        if status == 404:
            raise SymbolNotFound(symbol)
        if status != 200:
            raise UpstreamStatusError(status)

        try:
            return Quote.from_json(body)
        except ValidationError as exc:
            raise QuoteDecodeError(f"malformed quote from upstream {self._address}: {exc}") from exc
