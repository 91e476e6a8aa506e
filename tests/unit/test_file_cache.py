"""Unit tests for the on-disk quote cache layer."""
import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest

from baronial.core.quotes.cache.file_cache import FileQuoteCache
from baronial.core.quotes.errors import CacheRecordError, QuoteTransportError
from baronial.core.quotes.models import Quote

from conftest import MockSource, make_quote


class TestFileQuoteCache:

    def test_creates_directory(self, tmp_path, source):
        target = tmp_path / "nested" / "quotes"
        FileQuoteCache(source, str(target))
        assert target.is_dir()

    def test_record_path_is_lowercased_symbol(self, tmp_path, source):
        cache = FileQuoteCache(source, str(tmp_path))
        assert cache.path_for("AAPL") == tmp_path / "aapl.json"
        assert cache.path_for("BRK.B") == tmp_path / "brk.b.json"
        assert cache.path_for("../etc") == tmp_path / ".._etc.json"

    @pytest.mark.asyncio
    async def test_write_then_read_round_trip(self, tmp_path, source):
        cache = FileQuoteCache(source, str(tmp_path))
        written = Quote(symbol="IBM", from_symbol="usd", price=168.2037,
                        last_refreshed=datetime.now(timezone.utc) - timedelta(minutes=1))

        await cache.write_quote(written)
        got = await cache.quote("IBM")

        assert got == written
        assert got.price == written.price
        assert got.last_refreshed == written.last_refreshed
        assert source.call_count == 0

    @pytest.mark.asyncio
    async def test_miss_fetches_and_persists(self, tmp_path, source):
        cache = FileQuoteCache(source, str(tmp_path))

        q = await cache.quote("MSFT")

        assert source.calls == ["MSFT"]
        on_disk = json.loads((tmp_path / "msft.json").read_text())
        assert on_disk["symbol"] == "MSFT"
        assert on_disk["price"] == q.price
        assert Quote.model_validate(on_disk) == q

    @pytest.mark.asyncio
    async def test_case_insensitive_record(self, tmp_path, source):
        cache = FileQuoteCache(source, str(tmp_path))
        await cache.quote("AAPL")
        await cache.quote("aapl")
        assert source.call_count == 1
        assert [p.name for p in tmp_path.iterdir()] == ["aapl.json"]

    @pytest.mark.asyncio
    async def test_stale_record_is_refetched_and_overwritten(self, tmp_path, source):
        cache = FileQuoteCache(source, str(tmp_path), ttl=timedelta(hours=1))
        old = make_quote("MSFT", 1.0, age=timedelta(hours=3))
        await cache.write_quote(old)

        q = await cache.quote("MSFT")

        assert source.call_count == 1
        assert q.last_refreshed >= old.last_refreshed
        assert await cache.read_quote("MSFT") == q

    @pytest.mark.asyncio
    async def test_failure_leaves_record_untouched(self, tmp_path):
        source = MockSource(fail_with=QuoteTransportError("connection reset"))
        cache = FileQuoteCache(source, str(tmp_path), ttl=timedelta(hours=1))
        old = make_quote("MSFT", 1.0, age=timedelta(hours=3))
        await cache.write_quote(old)

        with pytest.raises(QuoteTransportError):
            await cache.quote("MSFT")

        assert await cache.read_quote("MSFT") == old

    @pytest.mark.asyncio
    async def test_failure_on_miss_writes_nothing(self, tmp_path):
        source = MockSource(fail_with=QuoteTransportError("connection reset"))
        cache = FileQuoteCache(source, str(tmp_path))

        with pytest.raises(QuoteTransportError):
            await cache.quote("MSFT")
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_corrupt_record_is_a_hard_error(self, tmp_path, source):
        cache = FileQuoteCache(source, str(tmp_path))
        (tmp_path / "msft.json").write_text("{not json")

        with pytest.raises(CacheRecordError):
            await cache.quote("MSFT")
        assert source.call_count == 0

    @pytest.mark.asyncio
    async def test_read_missing_returns_none(self, tmp_path, source):
        cache = FileQuoteCache(source, str(tmp_path))
        assert await cache.read_quote("NOPE") is None

    @pytest.mark.asyncio
    async def test_concurrent_writes_leave_a_whole_record(self, tmp_path, source):
        cache = FileQuoteCache(source, str(tmp_path))
        quotes = [make_quote("IBM", float(i)) for i in range(20)]

        await asyncio.gather(*(cache.write_quote(q) for q in quotes))

        final = await cache.read_quote("IBM")
        assert final in quotes
        assert [p.name for p in tmp_path.iterdir()] == ["ibm.json"]
