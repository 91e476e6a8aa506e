"""Normalized quote shape shared by every provider and cache layer."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def symbol_key(symbol: str) -> str:
    """Cache key for a symbol — lookups are case-insensitive."""
    return symbol.lower()


class Quote(BaseModel):
    """
    Wire shape:
      {"symbol": "MSFT", "fromSymbol": "usd", "price": 411.22, "refreshedAt": "2024-05-01T00:00:00Z"}
    Used for HTTP responses, durable records and upstream responses alike.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str
    from_symbol: str = Field(default="", alias="fromSymbol")
    price: float = Field(allow_inf_nan=False)
    last_refreshed: datetime = Field(alias="refreshedAt")

    @field_validator("last_refreshed")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_fresh(self, stale_at: datetime) -> bool:
        return self.last_refreshed > stale_at

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str | bytes) -> Quote:
        return cls.model_validate_json(raw)
