"""Alpha Vantage provider — GLOBAL_QUOTE endpoint, US equities quoted in USD."""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any

import aiohttp
import structlog
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError

from baronial.core.quotes.errors import (
    ProviderError,
    QuoteDecodeError,
    QuoteTransportError,
    SymbolNotFound,
)
from baronial.core.quotes.models import Quote
from baronial.core.quotes.providers.base import QuoteSource

ALPHAVANTAGE_BASE = "https://www.alphavantage.co/query"

logger = structlog.get_logger()


class GlobalQuote(BaseModel):
    """Provider-shaped quote; numeric fields arrive as JSON strings."""

    model_config = ConfigDict(populate_by_name=True)

    symbol:             str             = Field(alias="01. symbol")
    open:               float           = Field(alias="02. open")
    high:               float           = Field(alias="03. high")
    low:                float           = Field(alias="04. low")
    price:              float           = Field(alias="05. price", allow_inf_nan=False)
    volume:             NonNegativeInt  = Field(alias="06. volume")
    latest_trading_day: date            = Field(alias="07. latest trading day")
    previous_close:     float           = Field(alias="08. previous close")
    change:             float           = Field(alias="09. change")
    change_percent:     str             = Field(alias="10. change percent")


def parse_global_quote(payload: Any, symbol: str) -> GlobalQuote:
    """
    Expected payload:
      {"Global Quote": {"01. symbol": "IBM", "05. price": "168.2000", ...}}
    or, when the provider refuses the request:
      {"Information": "Thank you for using Alpha Vantage! ..."}
    """
    if not isinstance(payload, dict):
        raise QuoteDecodeError(f"unexpected Alpha Vantage payload for {symbol}")

    information = payload.get("Information")
    if information:
        raise ProviderError("alphavantage", information)

    raw = payload.get("Global Quote")
    if not raw:
        raise SymbolNotFound(symbol)

    try:
        return GlobalQuote.model_validate(raw)
    except ValidationError as exc:
        raise QuoteDecodeError(f"malformed Alpha Vantage quote for {symbol}: {exc}") from exc


class AlphaVantageProvider(QuoteSource):

    def __init__(self, api_key: str, base_url: str = ALPHAVANTAGE_BASE):
        self._api_key = api_key
        self._base_url = base_url

    @property
    def name(self) -> str:
        return "alphavantage"

    async def _fetch(self, params: dict[str, str]) -> Any:
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(self._base_url, params=params) as resp:
                    resp.raise_for_status()
                    return await resp.json(content_type=None)
        except ValueError as exc:
            raise QuoteDecodeError(f"Alpha Vantage returned invalid JSON: {exc}") from exc
        except aiohttp.ClientError as exc:
            raise QuoteTransportError(str(exc)) from exc

    async def raw_quote(self, symbol: str) -> GlobalQuote:
        params = {
            "function": "GLOBAL_QUOTE",
            "symbol": symbol,
            "apikey": self._api_key,
        }
        logger.info("provider.request", provider=self.name, symbol=symbol)
        payload = await self._fetch(params)
        return parse_global_quote(payload, symbol)

    async def quote(self, symbol: str) -> Quote:
        raw = await self.raw_quote(symbol)
        return Quote(
            symbol=symbol,
            from_symbol="usd",
            price=raw.price,
            last_refreshed=datetime.combine(raw.latest_trading_day, time.min, tzinfo=timezone.utc),
        )
