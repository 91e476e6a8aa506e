"""Pydantic request/response models for the v0 quote API."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from baronial.core.quotes.models import Quote


class QuoteUpdate(BaseModel):
    """Body of PUT /api/v0/quote — a Quote whose timestamp may be omitted."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str = Field(min_length=1)
    from_symbol: str = Field(default="usd", alias="fromSymbol")
    price: float = Field(allow_inf_nan=False)
    last_refreshed: datetime | None = Field(default=None, alias="refreshedAt")

    def to_quote(self, received_at: datetime) -> Quote:
        return Quote(
            symbol=self.symbol,
            from_symbol=self.from_symbol,
            price=self.price,
            last_refreshed=self.last_refreshed or received_at,
        )


class ErrorBody(BaseModel):
    error: str
    detail: str | None = None
    symbol: str | None = None


class MethodNotAllowedBody(BaseModel):
    error: str
    accepted: list[str]
