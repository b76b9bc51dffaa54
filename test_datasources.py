"""Tests for the Supabase and CSV data sources."""

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from journal_analytics.datasources import CsvDataSource, DataSourceError, SupabaseDataSource
from journal_analytics.datasources import supabase as supabase_module
from journal_analytics.datasources.base import row_to_trade

SUPABASE_URL = "https://project.supabase.co"


def supabase_row(**overrides) -> dict:
    row = {
        "id": "a1",
        "opened_at": "2025-01-06T14:30:00+00:00",
        "closed_at": "2025-01-06T15:00:00+00:00",
        "profit_loss_currency": 125.5,
        "instrument": "ES",
        "direction": "long",
        "entry_price": 5000.0,
        "exit_price": 5010.0,
        "position_size": 1,
        "strategies": {"name": "Opening Range"},
    }
    row.update(overrides)
    return row


class TestRowMapping:

    def test_embedded_strategy(self):
        trade = row_to_trade(supabase_row())

        assert trade.id == "a1"
        assert trade.openedAt == datetime(2025, 1, 6, 14, 30, tzinfo=timezone.utc)
        assert trade.profitAndLoss == 125.5
        assert trade.strategyName == "Opening Range"
        assert trade.symbol == "ES"
        assert trade.side == "long"

    def test_null_relation_and_pnl(self):
        trade = row_to_trade(supabase_row(strategies=None, profit_loss_currency=None, closed_at=None))

        assert trade.strategyName is None
        assert trade.profitAndLoss is None
        assert trade.closedAt is None


class TestSupabaseDataSource:

    def run(self, handler, token=None, **kwargs):
        async def fetch():
            source = SupabaseDataSource(
                SUPABASE_URL,
                "anon-key",
                transport=httpx.MockTransport(handler),
                retry_delay=0,
                **kwargs,
            )
            try:
                return await source.get_trades(access_token=token)
            finally:
                await source.close()

        return asyncio.run(fetch())

    def test_fetch_sends_auth_and_query(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[
                supabase_row(id="b", opened_at="2025-01-07T10:00:00Z"),
                supabase_row(id="a", opened_at="2025-01-06T10:00:00Z"),
            ])

        trades = self.run(handler, token="user-jwt")

        assert [t.id for t in trades] == ["a", "b"]
        request = seen[0]
        assert request.url.path == "/rest/v1/trades"
        assert request.url.params["select"] == "*,strategies(name)"
        assert request.url.params["order"] == "opened_at.asc"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer user-jwt"
        assert request.headers["Range"] == "0-999"

    def test_anon_key_used_without_user_token(self):
        seen = []

        def handler(request):
            seen.append(request.headers["Authorization"])
            return httpx.Response(200, json=[])

        assert self.run(handler) == []
        assert seen == ["Bearer anon-key"]

    def test_pages_until_short_page(self, monkeypatch):
        monkeypatch.setattr(supabase_module, "PAGE_SIZE", 2)
        ranges = []

        def handler(request):
            ranges.append(request.headers["Range"])
            start = int(request.headers["Range"].split("-")[0])
            rows = [supabase_row(id=str(i), opened_at=f"2025-01-0{i + 1}T10:00:00Z") for i in range(start, min(start + 2, 3))]
            return httpx.Response(200, json=rows)

        trades = self.run(handler)

        assert ranges == ["0-1", "2-3"]
        assert [t.id for t in trades] == ["0", "1", "2"]

    def test_retries_rate_limit(self, monkeypatch):
        monkeypatch.setattr(supabase_module, "RATE_LIMIT_DELAY", 0)
        calls = []

        def handler(request):
            calls.append(1)
            if len(calls) == 1:
                return httpx.Response(429)
            return httpx.Response(200, json=[supabase_row()])

        assert len(self.run(handler)) == 1
        assert len(calls) == 2

    def test_retries_timeout_then_gives_up(self, monkeypatch):
        monkeypatch.setattr(supabase_module, "MAX_RETRIES", 2)
        calls = []

        def handler(request):
            calls.append(1)
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(DataSourceError):
            self.run(handler)
        assert len(calls) == 3

    def test_http_error_is_raised(self):
        def handler(request):
            return httpx.Response(401, json={"message": "JWT expired"})

        with pytest.raises(DataSourceError, match="401"):
            self.run(handler)

    def test_malformed_row_is_raised(self):
        def handler(request):
            return httpx.Response(200, json=[{"id": "x"}])

        with pytest.raises(DataSourceError, match="Malformed"):
            self.run(handler)


class TestCsvDataSource:

    def test_reads_export(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_text(
            "id,opened_at,closed_at,profit_loss_currency,strategy_name,instrument,direction\n"
            "2,2025-01-07T10:00:00,,-40,,NQ,short\n"
            "1,2025-01-06T10:00:00,2025-01-06T11:30:00,75.25,Breakout,ES,long\n"
            "3,2025-01-08T10:00:00,garbage,,Breakout,ES,long\n"
        )

        trades = asyncio.run(CsvDataSource(path).get_trades())

        assert [t.id for t in trades] == ["1", "2", "3"]
        first, second, third = trades
        assert first.profitAndLoss == 75.25
        assert first.strategyName == "Breakout"
        assert first.closedAt == datetime(2025, 1, 6, 11, 30)
        assert second.closedAt is None
        assert second.strategyName is None
        assert second.side == "short"
        assert third.profitAndLoss is None
        assert third.closedAt is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            asyncio.run(CsvDataSource(tmp_path / "nope.csv").get_trades())
