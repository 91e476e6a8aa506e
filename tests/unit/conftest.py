"""Shared test helpers — a scriptable in-memory QuoteSource."""
from datetime import datetime, timedelta, timezone

import pytest

from baronial.core.quotes.errors import SymbolNotFound
from baronial.core.quotes.models import Quote
from baronial.core.quotes.providers.base import QuoteSource


def make_quote(symbol: str = "MSFT", price: float = 411.22, age: timedelta = timedelta(0)) -> Quote:
    return Quote(
        symbol=symbol,
        from_symbol="usd",
        price=price,
        last_refreshed=datetime.now(timezone.utc) - age,
    )


class MockSource(QuoteSource):
    """Returns a fresh quote per call; symbols in `missing` raise SymbolNotFound,
    and `fail_with` (when set) is raised for every call."""

    def __init__(self, prices: dict[str, float] | None = None, missing: set[str] = frozenset(), fail_with: Exception | None = None):
        self._prices = prices or {}
        self._missing = missing
        self.fail_with = fail_with
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def quote(self, symbol: str) -> Quote:
        self.calls.append(symbol)
        if self.fail_with is not None:
            raise self.fail_with
        if symbol.lower() in self._missing:
            raise SymbolNotFound(symbol)
        return make_quote(symbol, self._prices.get(symbol.lower(), 100.0))


@pytest.fixture
def source():
    return MockSource(prices={"msft": 411.22, "aapl": 189.5})
