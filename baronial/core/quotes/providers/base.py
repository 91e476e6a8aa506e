"""Abstract QuoteSource — providers and cache layers all implement this."""
from abc import ABC, abstractmethod

from baronial.core.quotes.models import Quote


class QuoteSource(ABC):

    @property
    @abstractmethod
    def name(self) -> str:
        """Short key for logs: 'alphavantage', 'upstream', 'memory(...)'"""
        ...

    @abstractmethod
    async def quote(self, symbol: str) -> Quote:
        """
        Returns the current Quote for `symbol`.
        Raises SymbolNotFound when the source has no data for it, or
        another QuoteError subclass on transport/decoding failures.
        Must tolerate concurrent calls for the same or different symbols.
        """
        ...
