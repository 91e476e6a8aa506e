"""Failure kinds a QuoteSource can raise.

The HTTP layer only needs to tell SymbolNotFound (404) apart from
everything else (500); the subclasses keep logs and tests precise.
"""


class QuoteError(Exception):
    pass


class SymbolNotFound(QuoteError):

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"no result for symbol \"{symbol}\"")


class QuoteTransportError(QuoteError):
    pass


class UpstreamStatusError(QuoteTransportError):

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"unexpected upstream status code {status}")


class ProviderError(QuoteTransportError):
    """The provider answered, but with an error message instead of a quote."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(message)


class QuoteDecodeError(QuoteError):
    pass


class CacheRecordError(QuoteError):

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"cache record {path}: {reason}")


class QuoteTimeout(QuoteError):
    pass


class ConfigurationError(RuntimeError):
    pass
